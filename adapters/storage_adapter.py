"""Local directory bucket for uploaded files (verification photos)."""

import logging
from pathlib import Path, PurePosixPath

from app.config import settings
from app.exceptions import ServiceValidationError

logger = logging.getLogger("dogoods.storage")


def ensure_bucket() -> Path:
    root = Path(settings.storage_dir)
    root.mkdir(parents=True, exist_ok=True)
    return root


def _resolve(path: str) -> Path:
    relative = PurePosixPath(path)
    if relative.is_absolute() or ".." in relative.parts:
        raise ServiceValidationError(f"Invalid storage path: {path}")
    return Path(settings.storage_dir).joinpath(*relative.parts)


def public_url(path: str) -> str:
    return f"{settings.storage_public_url.rstrip('/')}/{path}"


def save_file(path: str, content: bytes) -> str:
    """Write ``content`` under ``path`` inside the bucket and return its public URL."""
    if len(content) > settings.max_upload_bytes:
        raise ServiceValidationError(
            f"File too large (max {settings.max_upload_bytes} bytes)"
        )

    target = _resolve(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "wb") as f:
        f.write(content)

    logger.info("Stored file path=%s bytes=%d", path, len(content))
    return public_url(path)
