"""
Storage service for verification document files.
"""
import os
from datetime import datetime, timezone
from typing import Optional, Tuple
import boto3
from botocore.exceptions import BotoCoreError, ClientError

from mediconnect.core.config import Settings, settings as default_settings
from mediconnect.core.exceptions import UpstreamError
from mediconnect.core.logging import get_logger
from mediconnect.utils.file_utils import build_object_name

logger = get_logger(__name__)


class StorageService:
    """Service for storing uploaded files locally or on S3."""

    def __init__(self, settings: Settings = default_settings, s3_client=None):
        self.settings = settings
        self.use_s3 = settings.USE_S3
        self.s3_client = s3_client

        if self.use_s3 and self.s3_client is None:
            self._init_s3_client()

    def _init_s3_client(self):
        """Initialize S3 client."""
        try:
            self.s3_client = boto3.client('s3', region_name=self.settings.AWS_REGION)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to initialize S3 client: {e}")
            raise UpstreamError("Document storage unavailable")

    def save_file(self, file_content: bytes, user_id: str, filename: str, content_type: Optional[str]) -> Tuple[str, str]:
        """Save file and return its storage path and public URL."""
        object_name = build_object_name(user_id, filename)
        if self.use_s3:
            return self._save_to_s3(file_content, object_name, filename, content_type)
        return self._save_to_local(file_content, object_name)

    def _save_to_local(self, file_content: bytes, object_name: str) -> Tuple[str, str]:
        """Save file to local storage."""
        file_path = os.path.join(self.settings.UPLOAD_DIR, object_name)
        os.makedirs(os.path.dirname(file_path), exist_ok=True)

        try:
            with open(file_path, 'wb') as f:
                f.write(file_content)
        except OSError as e:
            logger.error(f"Failed to save file locally {file_path}: {e}")
            raise UpstreamError("Upload failed")

        logger.info(f"File saved locally: {file_path}")
        public_url = f"{self.settings.UPLOAD_URL_PREFIX.rstrip('/')}/{object_name}"
        return object_name, public_url

    def _save_to_s3(self, file_content: bytes, object_name: str, filename: str, content_type: Optional[str]) -> Tuple[str, str]:
        """Save file to S3 storage."""
        bucket_name = self.settings.AWS_S3_BUCKET
        if not bucket_name:
            raise UpstreamError("Document storage bucket is not configured")

        try:
            self.s3_client.put_object(
                Bucket=bucket_name,
                Key=object_name,
                Body=file_content,
                ContentType=content_type or 'application/octet-stream',
                Metadata={
                    'original_filename': filename,
                    'uploaded_at': datetime.now(timezone.utc).isoformat()
                }
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to save file to S3: {e}")
            raise UpstreamError(f"Upload failed: {e}")

        logger.info(f"File saved to S3: {object_name}")
        file_url = f"https://{bucket_name}.s3.{self.settings.AWS_REGION}.amazonaws.com/{object_name}"
        return object_name, file_url

    def delete_file(self, file_path: str) -> bool:
        """Delete a stored file. Failures are logged, not raised."""
        if self.use_s3:
            try:
                self.s3_client.delete_object(Bucket=self.settings.AWS_S3_BUCKET, Key=file_path)
            except (BotoCoreError, ClientError) as e:
                logger.error(f"Failed to delete S3 file {file_path}: {e}")
                return False
            logger.info(f"File deleted from S3: {file_path}")
            return True

        local_path = os.path.join(self.settings.UPLOAD_DIR, file_path)
        try:
            if os.path.exists(local_path):
                os.remove(local_path)
                logger.info(f"File deleted locally: {local_path}")
                return True
        except OSError as e:
            logger.error(f"Failed to delete local file {local_path}: {e}")
        return False
