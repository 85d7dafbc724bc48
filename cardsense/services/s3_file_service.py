"""S3FileService provides S3-backed storage for archived statements."""

import boto3
from botocore.exceptions import ClientError

from cardsense.core.settings import Settings


class S3FileService:
    """Service for S3 file operations: upload and ensure bucket."""

    def __init__(self, settings: Settings) -> None:
        """Initialize S3FileService and ensure the bucket exists."""
        self.s3 = boto3.client(
            "s3",
            endpoint_url=settings.s3_endpoint_url,
            aws_access_key_id=settings.s3_access_key,
            aws_secret_access_key=settings.s3_secret_key,
        )
        self.bucket = settings.s3_bucket
        self.ensure_bucket()

    def ensure_bucket(self) -> None:
        """Ensure the S3 bucket exists, create if not present."""
        try:
            self.s3.head_bucket(Bucket=self.bucket)
        except ClientError:
            self.s3.create_bucket(Bucket=self.bucket)

    def upload_fileobj(self, key: str, data: bytes, content_type: str | None = None) -> None:
        """Upload bytes to S3 under the given key."""
        extra = {"ContentType": content_type} if content_type else {}
        self.s3.put_object(Bucket=self.bucket, Key=str(key), Body=data, **extra)
