"""
Core dashboard logic.

This module is framework-agnostic - it doesn't import FastAPI or boto3.
Storage and persistence come in through protocols, so the listing order,
signing rules and failure policy can be tested in isolation.
"""

from .catalog import ObjectCatalog, StorageClient
from .dashboard import DashboardService, DashboardView
from .errors import (
    BackendUnavailable,
    ConfigurationMissing,
    DashboardError,
    InvalidArgument,
    PersistenceFailure,
)
from .models import (
    CatalogEntry,
    CatalogResult,
    ForwardConfig,
    SignedUrlRequest,
    StoredObject,
    format_file_size,
)

__all__ = [
    "ObjectCatalog",
    "StorageClient",
    "DashboardService",
    "DashboardView",
    "BackendUnavailable",
    "ConfigurationMissing",
    "DashboardError",
    "InvalidArgument",
    "PersistenceFailure",
    "CatalogEntry",
    "CatalogResult",
    "ForwardConfig",
    "SignedUrlRequest",
    "StoredObject",
    "format_file_size",
]
