"""
Tests for DashboardService composition and failure policy.

The service is where a failed listing becomes an empty list and where
write and signing failures are passed up, so those are the paths that
get the most attention here.
"""

import asyncio

import pytest

from cleanfeed_dashboard.core.dashboard import DashboardService
from cleanfeed_dashboard.core.errors import (
    BackendUnavailable,
    InvalidArgument,
    PersistenceFailure,
)
from cleanfeed_dashboard.core.models import ForwardConfig


class ExplodingConfigStore:
    """Config store whose every call fails."""

    def read(self):
        raise RuntimeError("disk on fire")

    def write(self, config):
        raise PersistenceFailure("read-only file system")


class TestViewDashboard:

    def test_combines_config_and_entries(self, service, config_store):
        config_store.write(ForwardConfig("rtmp://example.com/live", "abc123"))

        view = asyncio.run(service.view_dashboard())

        assert view.config == ForwardConfig("rtmp://example.com/live", "abc123")
        assert len(view.entries) == 3
        assert not view.catalog_degraded

    def test_lists_cleanfeed_prefix_with_cap_of_100(self, service, fake_store):
        asyncio.run(service.view_dashboard())

        assert fake_store.list_calls == [("cleanfeed/", 100)]

    def test_missing_config_file_still_renders(self, service):
        view = asyncio.run(service.view_dashboard())

        assert view.config == ForwardConfig()
        assert len(view.entries) == 3

    def test_backend_failure_degrades_to_empty(self, service, config_store, fake_store):
        """Storage outage: no entries, but the config half is intact."""
        config_store.write(ForwardConfig("rtmp://x", "k"))
        fake_store.list_error = BackendUnavailable("503 Slow Down")

        view = asyncio.run(service.view_dashboard())

        assert view.entries == []
        assert view.catalog_degraded
        assert view.config == ForwardConfig("rtmp://x", "k")

    def test_config_failure_does_not_block_entries(self, catalog):
        service = DashboardService(config_store=ExplodingConfigStore(), catalog=catalog)

        view = asyncio.run(service.view_dashboard())

        assert view.config == ForwardConfig()
        assert len(view.entries) == 3

    def test_uses_configured_prefix_and_cap(self, config_store, catalog, fake_store):
        service = DashboardService(
            config_store=config_store,
            catalog=catalog,
            prefix="other/",
            max_items=5,
        )

        view = asyncio.run(service.view_dashboard())

        assert fake_store.list_calls == [("other/", 5)]
        assert [e.key for e in view.entries] == ["other/ignored.mp4"]


class TestSaveConfig:

    def test_trims_and_persists(self, service, config_path):
        service.save_config(" rtmp://x ", " key1 ")

        assert config_path.read_text(encoding="utf-8") == "RTMP_URL=rtmp://x\nSTREAM_KEY=key1\n"

    def test_absent_inputs_become_empty_strings(self, service, config_path):
        saved = service.save_config(None, None)

        assert saved == ForwardConfig("", "")
        assert config_path.read_text(encoding="utf-8") == "RTMP_URL=\nSTREAM_KEY=\n"

    def test_returns_what_was_saved(self, service, config_store):
        saved = service.save_config("rtmp://x\t", "")

        assert saved == config_store.read() == ForwardConfig("rtmp://x", "")

    def test_write_failure_propagates(self, catalog):
        service = DashboardService(config_store=ExplodingConfigStore(), catalog=catalog)

        with pytest.raises(PersistenceFailure):
            service.save_config("rtmp://x", "k")


class TestPresignRedirect:

    def test_returns_signed_url(self, service, fake_store):
        url = service.presign_redirect("cleanfeed/x.mp4")

        assert "cleanfeed/x.mp4" in url
        assert fake_store.sign_calls == [("cleanfeed/x.mp4", 3600)]

    @pytest.mark.parametrize("key", ["", None])
    def test_missing_key_is_invalid(self, service, key):
        with pytest.raises(InvalidArgument):
            service.presign_redirect(key)

    def test_backend_failure_is_not_swallowed(self, service, fake_store):
        fake_store.sign_error = BackendUnavailable("signing unavailable")

        with pytest.raises(BackendUnavailable):
            service.presign_redirect("cleanfeed/x.mp4")
