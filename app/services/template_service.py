import re
from typing import Dict, List

PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")


def render_template(content: str, variables: Dict[str, str]) -> str:
    """Replace {{name}} placeholders. Unknown placeholders are left as they are."""
    def substitute(match):
        key = match.group(1)
        return str(variables[key]) if key in variables else match.group(0)

    return PLACEHOLDER.sub(substitute, content or "")


def find_placeholders(content: str) -> List[str]:
    seen = []
    for name in PLACEHOLDER.findall(content or ""):
        if name not in seen:
            seen.append(name)
    return seen
