"""
Unit tests for tier resolution and navigation classification.
"""
import pytest

from edge_router.models import Tier
from edge_router.routing import is_navigation, resolve_tier


class TestResolveTier:

    def test_enterprise_param_wins_over_cookie(self):
        assert resolve_tier("enterprise", "lite") == Tier.ENTERPRISE

    def test_explicit_lite_param_overrides_enterprise_cookie(self):
        assert resolve_tier("lite", "enterprise") == Tier.LITE

    def test_null_param_and_no_cookie_defaults_to_lite(self):
        assert resolve_tier(None, None) == Tier.LITE

    def test_garbage_param_and_no_cookie_defaults_to_lite(self):
        assert resolve_tier("admin", None) == Tier.LITE

    def test_garbage_param_falls_through_to_cookie(self):
        assert resolve_tier("admin", Tier.ENTERPRISE) == Tier.ENTERPRISE

    def test_resolved_tier_is_plain_string_compatible(self):
        assert resolve_tier(None, None) == "lite"


class TestIsNavigation:

    @pytest.mark.parametrize("url", [
        "https://example.com/?build=1.0.0",
        "https://example.com/?type=enterprise",
        "https://example.com/?pin=0.1.0-27",
        "https://example.com/assets/app.js?pin=0.1.0-27",
    ])
    def test_routing_params_mark_navigation(self, url):
        assert is_navigation({}, url) is True

    def test_root_path(self):
        assert is_navigation({}, "https://example.com/") is True

    def test_non_file_path_with_html_accept(self):
        headers = {"accept": "text/html,application/xhtml+xml;q=0.9"}
        assert is_navigation(headers, "https://example.com/dashboard") is True

    def test_html_accept_is_case_insensitive(self):
        assert is_navigation({"accept": "Text/HTML"}, "https://example.com/dashboard") is True

    def test_asset_path_with_html_accept(self):
        assert is_navigation({"accept": "text/html"}, "https://example.com/assets/app.js") is False

    def test_non_file_path_without_html_accept(self):
        assert is_navigation({"accept": "application/json"}, "https://example.com/dashboard") is False

    def test_no_accept_header(self):
        assert is_navigation({}, "https://example.com/dashboard") is False

    def test_unrelated_query_params_do_not_count(self):
        assert is_navigation({}, "https://example.com/api/data?machineId=abc") is False
