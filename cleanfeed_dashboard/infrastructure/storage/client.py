"""
Object storage client for uploaded recordings.

Supports DigitalOcean Spaces (S3-compatible) with mock mode for local
development. Spaces speaks the S3 API, so the same client works against
AWS S3, MinIO or R2 by changing the endpoint.

Mock mode keeps object metadata in memory, enabling the dashboard to run
without provisioning a bucket.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from ...core.catalog import StorageClient
from ...core.errors import BackendUnavailable
from ...core.models import DEFAULT_PRESIGN_EXPIRY_SECONDS, StoredObject

logger = logging.getLogger(__name__)


class StorageError(BackendUnavailable):
    """Raised when storage operations fail."""
    pass


@dataclass
class StorageConfig:
    """Configuration for Spaces/S3-compatible storage."""
    access_key_id: str
    secret_access_key: str
    bucket_name: str
    endpoint_url: str
    region: str
    connect_timeout: float = 3.0
    read_timeout: float = 5.0


class SpacesStorageClient:
    """
    DigitalOcean Spaces client backed by boto3.

    boto3 is synchronous, so listing runs in a worker thread to keep the
    event loop free while the backend responds. Presigning is a local
    HMAC computation and runs inline.
    """

    def __init__(self, config: StorageConfig, s3_client=None) -> None:
        """
        Initialize the boto3 client.

        An already-built s3_client can be passed in (tests use this with
        botocore's Stubber).
        """
        self._config = config

        if s3_client is None:
            s3_client = self._build_s3_client(config)
        self._s3_client = s3_client

        logger.info(
            "Initialized Spaces storage client",
            extra={
                "bucket": config.bucket_name,
                "endpoint": config.endpoint_url,
            }
        )

    @staticmethod
    def _build_s3_client(config: StorageConfig):
        import boto3
        from botocore.config import Config

        # Spaces needs v4 signatures; path-style keeps the bucket out of
        # the hostname so custom endpoints work unchanged.
        boto_config = Config(
            signature_version="s3v4",
            s3={"addressing_style": "path"},
            connect_timeout=config.connect_timeout,
            read_timeout=config.read_timeout,
            retries={"total_max_attempts": 1},
        )

        return boto3.client(
            "s3",
            endpoint_url=config.endpoint_url,
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.secret_access_key,
            region_name=config.region,
            config=boto_config,
        )

    @property
    def bucket_name(self) -> str:
        return self._config.bucket_name

    async def list_objects(self, prefix: str, max_keys: int) -> list[StoredObject]:
        """
        List objects under prefix with a single ListObjectsV2 call.

        Only the first page is requested; continuation tokens are ignored.
        """
        try:
            response = await asyncio.to_thread(
                self._s3_client.list_objects_v2,
                Bucket=self._config.bucket_name,
                Prefix=prefix,
                MaxKeys=max_keys,
            )
        except Exception as e:
            logger.error(
                "Failed to list objects",
                extra={"prefix": prefix, "error": str(e)}
            )
            raise StorageError(f"List failed: {e}") from e

        objects = [
            StoredObject(
                key=item["Key"],
                size_bytes=int(item.get("Size", 0)),
                last_modified=item["LastModified"],
            )
            for item in response.get("Contents", [])
        ]

        logger.debug(
            "Listed objects",
            extra={
                "prefix": prefix,
                "count": len(objects),
                "truncated": response.get("IsTruncated", False),
            }
        )

        return objects

    def get_presigned_url(
        self,
        key: str,
        expiry_seconds: int = DEFAULT_PRESIGN_EXPIRY_SECONDS,
    ) -> str:
        """Generate a GetObject URL valid for expiry_seconds."""
        try:
            return self._s3_client.generate_presigned_url(
                "get_object",
                Params={
                    "Bucket": self._config.bucket_name,
                    "Key": key,
                },
                ExpiresIn=expiry_seconds,
            )
        except Exception as e:
            logger.error(
                "Failed to generate presigned URL",
                extra={"key": key, "error": str(e)}
            )
            raise StorageError(f"Presigned URL generation failed: {e}") from e


# ---------------------------------------------------------------------------
# Mock Storage for Local Development
# ---------------------------------------------------------------------------

class MockStorageClient:
    """
    In-memory object listing for local development.

    Holds object metadata only; "URLs" are mock URIs. Objects are listed
    in key order, the same order S3 uses.
    """

    def __init__(self, bucket_name: str = "mock-bucket") -> None:
        self._bucket_name = bucket_name
        self._objects: dict[str, StoredObject] = {}
        logger.info("Initialized mock storage client (in-memory)")

    @property
    def bucket_name(self) -> str:
        return self._bucket_name

    def put_object(
        self,
        key: str,
        size_bytes: int,
        last_modified: Optional[datetime] = None,
    ) -> StoredObject:
        """Register an object so it shows up in listings."""
        stored = StoredObject(
            key=key,
            size_bytes=size_bytes,
            last_modified=last_modified or datetime.now(timezone.utc),
        )
        self._objects[key] = stored
        return stored

    async def list_objects(self, prefix: str, max_keys: int) -> list[StoredObject]:
        keys = sorted(k for k in self._objects if k.startswith(prefix))
        return [self._objects[k] for k in keys[:max_keys]]

    def get_presigned_url(
        self,
        key: str,
        expiry_seconds: int = DEFAULT_PRESIGN_EXPIRY_SECONDS,
    ) -> str:
        return f"mock://{self._bucket_name}/{key}?expires={expiry_seconds}"


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_storage_client(
    config: Optional[StorageConfig] = None,
    mock_mode: bool = False,
) -> StorageClient:
    """
    Create storage client based on configuration.

    Args:
        config: Storage configuration (required if not mock_mode)
        mock_mode: If True, return the in-memory client

    Returns:
        StorageClient implementation (Spaces or Mock)
    """
    if mock_mode:
        bucket = config.bucket_name if config and config.bucket_name else "mock-bucket"
        return MockStorageClient(bucket_name=bucket)

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return SpacesStorageClient(config)
