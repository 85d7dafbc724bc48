"""Archiving of uploaded statement files."""

import re

from cardsense.core.utils import get_logger, utcnow

from .s3_file_service import S3FileService

logger = get_logger("cardsense.files")


def statement_key(user_id: str, filename: str, timestamp_ms: int | None = None) -> str:
    """Build the storage key ``uploads/<user>/<epoch-ms>-<filename>`` for a statement."""
    if timestamp_ms is None:
        timestamp_ms = int(utcnow().timestamp() * 1000)
    safe_name = re.sub(r"[^A-Za-z0-9._-]", "_", filename) or "statement"
    return f"uploads/{user_id}/{timestamp_ms}-{safe_name}"


class FileService:
    """Stores statement uploads, using S3 as backend."""

    def __init__(self, s3_service: S3FileService) -> None:
        """Initialize FileService with an S3FileService instance."""
        self.s3 = s3_service

    def archive_statement(self, user_id: str, filename: str, data: bytes, content_type: str | None = None) -> str:
        """Save a statement file and return its storage key."""
        key = statement_key(user_id, filename)
        self.s3.upload_fileobj(key, data, content_type)
        logger.info(f"Archived statement {filename!r} to {key}")
        return key
