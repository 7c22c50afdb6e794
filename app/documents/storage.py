import os
import uuid
import mimetypes
from datetime import datetime
from pathlib import Path

from app import config

# Configuration
MAX_FILE_SIZE = config.MAX_UPLOAD_SIZE_MB * 1024 * 1024
ALLOWED_EXTENSIONS = {
    '.pdf', '.doc', '.docx', '.txt', '.rtf',
    '.jpg', '.jpeg', '.png', '.gif',
    '.xls', '.xlsx', '.ppt', '.pptx'
}


class LocalFileStorage:
    """Stores uploaded files on local disk under a key such as documents/3/<name>."""

    def __init__(self, root: str):
        self.root = Path(root)

    def build_key(self, prefix: str, owner_id: int, file_name: str) -> str:
        safe_name = Path(file_name).name.replace(" ", "_")
        stamp = datetime.utcnow().strftime("%Y%m%d%H%M%S")
        return f"{prefix}/{owner_id}/{stamp}-{uuid.uuid4().hex[:8]}-{safe_name}"

    def put(self, key: str, data: bytes) -> str:
        """Write `data` under `key` and return the URL it is served from."""
        path = self.path_for(key)
        os.makedirs(path.parent, exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)
        return f"/files/{key}"

    def path_for(self, key: str) -> Path:
        path = (self.root / key).resolve()
        # Keys come from build_key, but never let one escape the storage root
        if self.root.resolve() not in path.parents:
            raise ValueError(f"Invalid storage key: {key}")
        return path

    def delete(self, key: str) -> None:
        path = self.path_for(key)
        if path.exists():
            os.remove(path)


def get_storage() -> LocalFileStorage:
    return LocalFileStorage(config.UPLOAD_DIR)


def is_allowed_file(file_name: str) -> bool:
    return Path(file_name).suffix.lower() in ALLOWED_EXTENSIONS


def guess_mime_type(file_name: str, declared: str = None) -> str:
    return declared or mimetypes.guess_type(file_name)[0] or 'application/octet-stream'
