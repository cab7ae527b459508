import os
from uuid import uuid4

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}


class ImageStorageError(Exception):
    pass


class LocalImageStorage:
    """
    Saves uploaded product images under ``media_dir`` and returns the URL
    they are served from.
    """

    def __init__(self, media_dir: str, base_url: str = "/media", max_bytes: int = 5 * 1024 * 1024):
        self.media_dir = media_dir
        self.base_url = base_url.rstrip("/")
        self.max_bytes = max_bytes

    def save(self, filename: str, data: bytes) -> str:
        ext = os.path.splitext(filename or "")[1].lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ImageStorageError(f"Unsupported image type: {ext or 'none'}")
        if not data:
            raise ImageStorageError("Empty upload")
        if len(data) > self.max_bytes:
            raise ImageStorageError("Image too large")
        os.makedirs(self.media_dir, exist_ok=True)
        name = f"{uuid4().hex}{ext}"
        with open(os.path.join(self.media_dir, name), "wb") as f:
            f.write(data)
        return f"{self.base_url}/{name}"

    def health_check(self) -> bool:
        try:
            os.makedirs(self.media_dir, exist_ok=True)
        except OSError:
            return False
        return os.access(self.media_dir, os.W_OK)
