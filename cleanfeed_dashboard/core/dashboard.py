"""
Dashboard use cases.

DashboardService composes the config store and the recording catalog
into the three things the operator can do: look at the dashboard, save
forwarding settings, and follow a download link.

This is where the failure policy lives. A failed listing becomes an
empty list (the page still renders); a failed save or signing is
surfaced to the caller.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol

from .catalog import ObjectCatalog
from .models import DEFAULT_PRESIGN_EXPIRY_SECONDS, CatalogEntry, ForwardConfig

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PREFIX = "cleanfeed/"
DEFAULT_CATALOG_MAX_ITEMS = 100


class ForwardConfigStore(Protocol):
    """Persistence for the forwarding configuration."""

    def read(self) -> ForwardConfig:
        ...

    def write(self, config: ForwardConfig) -> None:
        ...


@dataclass
class DashboardView:
    """Everything the dashboard page shows."""
    config: ForwardConfig = field(default_factory=ForwardConfig)
    entries: list[CatalogEntry] = field(default_factory=list)
    catalog_degraded: bool = False


class DashboardService:
    """
    Stateless request/response operations for the dashboard.

    Safe to share across concurrent requests: the only mutable state is
    the config file, owned by the store.
    """

    def __init__(
        self,
        config_store: ForwardConfigStore,
        catalog: ObjectCatalog,
        prefix: str = DEFAULT_CATALOG_PREFIX,
        max_items: int = DEFAULT_CATALOG_MAX_ITEMS,
        expiry_seconds: int = DEFAULT_PRESIGN_EXPIRY_SECONDS,
    ) -> None:
        self._config_store = config_store
        self._catalog = catalog
        self._prefix = prefix
        self._max_items = max_items
        self._expiry_seconds = expiry_seconds

    async def view_dashboard(self) -> DashboardView:
        """
        Current config plus the most recent recordings.

        The two halves fail independently. A broken config file still
        shows the recordings, and a storage outage still shows the config.
        """
        try:
            config = self._config_store.read()
        except Exception as e:
            logger.error(
                "Config read failed, showing empty config",
                extra={"error": str(e)}
            )
            config = ForwardConfig()

        result = await self._catalog.list_recent(self._prefix, self._max_items)
        if not result.ok:
            logger.warning(
                "Recording list unavailable, rendering empty list",
                extra={"prefix": self._prefix, "error": str(result.error)}
            )

        return DashboardView(
            config=config,
            entries=result.entries if result.ok else [],
            catalog_degraded=not result.ok,
        )

    def save_config(
        self,
        rtmp_url: Optional[str],
        stream_key: Optional[str],
    ) -> ForwardConfig:
        """
        Trim and persist new forwarding settings.

        Missing inputs are saved as empty strings; the file is always
        fully replaced. PersistenceFailure propagates so the operator
        learns the save did not take effect.
        """
        config = ForwardConfig(
            rtmp_url=(rtmp_url or "").strip(),
            stream_key=(stream_key or "").strip(),
        )
        self._config_store.write(config)
        return config

    def presign_redirect(self, key: Optional[str]) -> str:
        """Signed URL to redirect the operator to. Raises InvalidArgument for no key."""
        return self._catalog.sign(key, self._expiry_seconds)
