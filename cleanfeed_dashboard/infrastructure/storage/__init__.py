"""
Object storage integration for uploaded recordings.

Supports DigitalOcean Spaces (and any S3-compatible store) via boto3.
Includes mock mode for local development without credentials.
"""

from .client import (
    MockStorageClient,
    SpacesStorageClient,
    StorageClient,
    StorageConfig,
    StorageError,
    create_storage_client,
)

__all__ = [
    "MockStorageClient",
    "SpacesStorageClient",
    "StorageClient",
    "StorageConfig",
    "StorageError",
    "create_storage_client",
]
