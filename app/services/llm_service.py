"""
Thin wrapper over the OpenAI chat completions API.

Routes get an `LLMService` through the `get_llm_service` dependency, so tests
can swap in a fake client.
"""
import json
import logging
from typing import Any, Dict, List, Optional

import openai
from fastapi import Depends
from openai import OpenAI

from app import config
from app.errors import UpstreamServiceError

logger = logging.getLogger(__name__)


def get_llm_client() -> OpenAI:
    try:
        return OpenAI(api_key=config.OPENAI_API_KEY)
    except openai.OpenAIError as e:
        # Raised when no API key is configured
        logger.error(f"OpenAI client unavailable: {e}")
        raise UpstreamServiceError("ai_service_error")


class LLMService:
    def __init__(self, client, model: str = None):
        self.client = client
        self.model = model or config.OPENAI_MODEL

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        json_response: bool = False,
        temperature: float = 0.2,
        max_tokens: int = 1500
    ) -> str:
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt}
        ]
        kwargs = {}
        if json_response:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
                **kwargs
            )
        except openai.OpenAIError as e:
            logger.error(f"OpenAI API error: {str(e)}")
            raise UpstreamServiceError("ai_service_error")

        content = response.choices[0].message.content if response.choices else None
        if not content:
            logger.error("OpenAI returned an empty completion")
            raise UpstreamServiceError("ai_invalid_response")

        logger.info(f"LLM completion - model: {self.model}, prompt length: {len(user_prompt)}")
        return content

    def complete_json(self, system_prompt: str, user_prompt: str, **kwargs) -> Dict[str, Any]:
        content = self.complete(system_prompt, user_prompt, json_response=True, **kwargs)
        try:
            data = json.loads(content)
        except json.JSONDecodeError:
            logger.error("OpenAI returned malformed JSON")
            raise UpstreamServiceError("ai_invalid_response")
        if not isinstance(data, dict):
            raise UpstreamServiceError("ai_invalid_response")
        return data


def get_llm_service(client=Depends(get_llm_client)) -> LLMService:
    return LLMService(client)


def average_confidence(values: List[Any]) -> Optional[float]:
    """Mean confidence as a percentage; model scores in 0..1 are scaled up."""
    scores = [float(v) for v in values if isinstance(v, (int, float))]
    if not scores:
        return None
    mean = sum(scores) / len(scores)
    if all(score <= 1 for score in scores):
        mean *= 100
    return round(min(max(mean, 0.0), 100.0), 2)
