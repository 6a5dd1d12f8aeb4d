"""
Local storage for uploaded profile images.

Files live under ``settings.media_root`` in one folder per kind (``avatar``,
``banner``) and are served back through the ``/storage`` mount. Images are
stored as uploaded.
"""

import secrets
from pathlib import Path

from linkshelf.config import settings
from linkshelf.exceptions import ValidationProblem
from linkshelf.utils.logger import setup_logger

logger = setup_logger("media_storage")

ALLOWED_EXTENSIONS = ("jpg", "jpeg", "png")

# Leading bytes of each accepted format.
_SIGNATURES = {
    "png": (b"\x89PNG\r\n\x1a\n",),
    "jpg": (b"\xff\xd8\xff",),
    "jpeg": (b"\xff\xd8\xff",),
}


def media_url(path: str | None) -> str | None:
    """Public URL of a stored file, or None when nothing is stored."""
    if not path:
        return None
    return f"{settings.app_url.rstrip('/')}/storage/{path}"


class MediaStorage:
    def __init__(self, root: str | Path | None = None):
        self.root = Path(root if root is not None else settings.media_root)

    def validate_image(self, field: str, filename: str | None, data: bytes) -> str:
        """
        Check an uploaded image and return its normalized extension.

        Raises ``ValidationProblem`` keyed by ``field`` listing every failed rule.
        """
        messages = []
        extension = Path(filename or "").suffix.lower().lstrip(".")

        if extension not in ALLOWED_EXTENSIONS:
            messages.append(
                f"The {field} must be a file of type: {', '.join(ALLOWED_EXTENSIONS)}."
            )
        elif not data.startswith(_SIGNATURES[extension]):
            messages.append(f"The {field} must be an image.")

        if len(data) > settings.max_image_kilobytes * 1024:
            messages.append(
                f"The {field} must not be greater than {settings.max_image_kilobytes} kilobytes."
            )

        if messages:
            raise ValidationProblem({field: messages})
        return extension

    def save(self, kind: str, data: bytes, extension: str) -> str:
        """Write ``data`` under ``kind/`` with a random name; returns the relative path."""
        directory = self.root / kind
        directory.mkdir(parents=True, exist_ok=True)
        relative = f"{kind}/{secrets.token_hex(16)}.{extension}"
        (self.root / relative).write_bytes(data)
        logger.info(f"Stored {len(data)} bytes at {relative}")
        return relative

    def delete(self, relative: str | None) -> None:
        """Remove a previously stored file. Missing files are ignored."""
        if not relative:
            return
        target = (self.root / relative).resolve()
        if self.root.resolve() not in target.parents:
            logger.warning(f"Refusing to delete path outside media root: {relative}")
            return
        try:
            target.unlink()
            logger.info(f"Deleted stored file {relative}")
        except FileNotFoundError:
            logger.debug(f"Stored file already gone: {relative}")
