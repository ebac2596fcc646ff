"""
Recording catalog: listing, ordering and signing.

ObjectCatalog is a stateless facade over a StorageClient. It turns a raw
listing into CatalogEntry values that already carry a download link, so
the page never needs a second round trip per recording.

Listing failures are returned as values (CatalogResult.error), not
raised. Whether a failed listing should look like an empty bucket is the
caller's decision, not the catalog's.
"""

import asyncio
import logging
from typing import Optional, Protocol

from .errors import BackendUnavailable, InvalidArgument
from .models import (
    DEFAULT_PRESIGN_EXPIRY_SECONDS,
    CatalogEntry,
    CatalogResult,
    SignedUrlRequest,
    StoredObject,
)

logger = logging.getLogger(__name__)

DEFAULT_LIST_TIMEOUT_SECONDS = 5.0


class StorageClient(Protocol):
    """
    Protocol for the two storage operations the dashboard needs.

    Tests provide fakes; production uses SpacesStorageClient.
    """

    @property
    def bucket_name(self) -> str:
        ...

    async def list_objects(
        self,
        prefix: str,
        max_keys: int,
    ) -> list[StoredObject]:
        """Return at most max_keys objects under prefix, in one call."""
        ...

    def get_presigned_url(
        self,
        key: str,
        expiry_seconds: int = DEFAULT_PRESIGN_EXPIRY_SECONDS,
    ) -> str:
        """Generate a temporary download URL. Does not contact the backend."""
        ...


class ObjectCatalog:
    """Lists recent recordings and produces time-limited links to them."""

    def __init__(
        self,
        storage: StorageClient,
        list_timeout_seconds: float = DEFAULT_LIST_TIMEOUT_SECONDS,
        expiry_seconds: int = DEFAULT_PRESIGN_EXPIRY_SECONDS,
    ) -> None:
        self._storage = storage
        self._list_timeout_seconds = list_timeout_seconds
        self._expiry_seconds = expiry_seconds

    async def list_recent(self, prefix: str, max_items: int) -> CatalogResult:
        """
        List up to max_items objects under prefix, newest first.

        One backend call, no pagination, no retries. Every entry is
        signed before returning. Backend errors and timeouts come back
        as CatalogResult.error.
        """
        if max_items < 1:
            raise InvalidArgument("max_items must be at least 1")

        try:
            objects = await asyncio.wait_for(
                self._storage.list_objects(prefix, max_items),
                timeout=self._list_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.error(
                "Listing timed out",
                extra={"prefix": prefix, "timeout_seconds": self._list_timeout_seconds}
            )
            return CatalogResult.failed(
                BackendUnavailable(
                    f"Listing did not complete within {self._list_timeout_seconds}s"
                )
            )
        except BackendUnavailable as e:
            return CatalogResult.failed(e)
        except Exception as e:
            logger.error(
                "Listing failed",
                extra={"prefix": prefix, "error": str(e)}
            )
            return CatalogResult.failed(BackendUnavailable(f"Listing failed: {e}"))

        recent = sorted(objects, key=lambda obj: obj.last_modified, reverse=True)
        recent = recent[:max_items]

        try:
            entries = [
                CatalogEntry(
                    object=obj,
                    signed_url=self._storage.get_presigned_url(obj.key, self._expiry_seconds),
                )
                for obj in recent
            ]
        except BackendUnavailable as e:
            return CatalogResult.failed(e)
        except Exception as e:
            logger.error(
                "Signing failed while listing",
                extra={"prefix": prefix, "error": str(e)}
            )
            return CatalogResult.failed(BackendUnavailable(f"Signing failed: {e}"))

        logger.debug(
            "Built catalog",
            extra={"prefix": prefix, "count": len(entries)}
        )

        return CatalogResult(entries=entries)

    def sign(
        self,
        key: Optional[str],
        expiry_seconds: int = DEFAULT_PRESIGN_EXPIRY_SECONDS,
    ) -> str:
        """
        Produce a time-limited download URL for key.

        The key is not checked against the bucket; a link to a missing
        object is still a valid link.

        Raises:
            InvalidArgument: key is empty or None (checked before any
                backend call)
            BackendUnavailable: the backend could not sign the URL
        """
        if not key:
            raise InvalidArgument("missing key")

        request = SignedUrlRequest(key=key, expiry_seconds=expiry_seconds)

        try:
            return self._storage.get_presigned_url(request.key, request.expiry_seconds)
        except BackendUnavailable:
            raise
        except Exception as e:
            logger.error(
                "Signing failed",
                extra={"key": key, "error": str(e)}
            )
            raise BackendUnavailable(f"Signing failed: {e}") from e
