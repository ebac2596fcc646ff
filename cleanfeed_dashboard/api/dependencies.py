"""
FastAPI dependency injection.

Dependencies provide the operator check, the config store, the storage
client and the dashboard service to route handlers. Routes never build
their own collaborators, so tests can swap any of them through
app.dependency_overrides.
"""

import logging
import secrets
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from ..config.settings import Settings, get_settings
from ..core.catalog import ObjectCatalog
from ..core.dashboard import DashboardService
from ..infrastructure.forward_config.store import ConfigStore
from ..infrastructure.storage.client import StorageClient, create_storage_client

logger = logging.getLogger(__name__)

AUTH_REALM = "Cleanfeed Dashboard"

# auto_error=False so missing credentials get the same 401 as wrong ones
basic_auth = HTTPBasic(realm=AUTH_REALM, auto_error=False)

# One storage client per process; boto3 clients are thread-safe
_storage_client: Optional[StorageClient] = None


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------

async def verify_operator(
    settings: Annotated[Settings, Depends(get_settings)],
    credentials: Optional[HTTPBasicCredentials] = Security(basic_auth),
) -> str:
    """
    Check HTTP Basic credentials against the single operator account.

    Both halves are always compared (constant time) and every failure
    gets the same response, so the client can't tell a wrong username
    from a wrong password.

    Raises 401 with a WWW-Authenticate challenge on failure.
    """
    if credentials is not None:
        user_ok = secrets.compare_digest(
            credentials.username.encode("utf-8"),
            settings.dash_user.encode("utf-8"),
        )
        pass_ok = secrets.compare_digest(
            credentials.password.encode("utf-8"),
            settings.dash_pass.encode("utf-8"),
        )
        if user_ok and pass_ok and settings.dash_user:
            return credentials.username

    logger.warning(
        "Rejected dashboard request",
        extra={"credentials_present": credentials is not None}
    )
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Authentication required",
        headers={"WWW-Authenticate": f'Basic realm="{AUTH_REALM}"'},
    )


# ---------------------------------------------------------------------------
# Service Dependencies
# ---------------------------------------------------------------------------

def get_config_store(
    settings: Annotated[Settings, Depends(get_settings)],
) -> ConfigStore:
    """Provide the forwarding config store. Cheap to build per request."""
    return ConfigStore(settings.forward_env_path)


def get_storage_client(
    settings: Annotated[Settings, Depends(get_settings)],
) -> StorageClient:
    """
    Provide the storage client.

    Returns either the Spaces client or the in-memory mock, created
    once and reused across requests.
    """
    global _storage_client

    if _storage_client is None:
        _storage_client = create_storage_client(
            config=settings.storage_config(),
            mock_mode=settings.spaces_mock_mode,
        )
        logger.info(
            "Created storage client",
            extra={"mock_mode": settings.spaces_mock_mode}
        )

    return _storage_client


def reset_storage_client() -> None:
    """Drop the cached storage client (used on shutdown and in tests)."""
    global _storage_client
    _storage_client = None


def get_object_catalog(
    settings: Annotated[Settings, Depends(get_settings)],
    storage: Annotated[StorageClient, Depends(get_storage_client)],
) -> ObjectCatalog:
    return ObjectCatalog(
        storage,
        list_timeout_seconds=settings.catalog_list_timeout_seconds,
        expiry_seconds=settings.presign_expiry_seconds,
    )


def get_dashboard_service(
    settings: Annotated[Settings, Depends(get_settings)],
    config_store: Annotated[ConfigStore, Depends(get_config_store)],
    catalog: Annotated[ObjectCatalog, Depends(get_object_catalog)],
) -> DashboardService:
    """
    Provide the DashboardService.

    The service is stateless, so a new instance per request is fine.
    """
    return DashboardService(
        config_store=config_store,
        catalog=catalog,
        prefix=settings.catalog_prefix,
        max_items=settings.catalog_max_items,
        expiry_seconds=settings.presign_expiry_seconds,
    )


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

DashboardServiceDep = Annotated[DashboardService, Depends(get_dashboard_service)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
