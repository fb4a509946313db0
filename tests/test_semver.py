"""
Unit tests for semver range matching.
"""
import pytest

from edge_router.routing import parse_version, semver_satisfies


class TestParseVersion:

    def test_three_part_version(self):
        assert parse_version("1.2.3") == (1, 2, 3)

    @pytest.mark.parametrize("value", ["1.2", "1.2.3.4", "a.b.c", "1.2.-3", "", None, "1.2.3-4"])
    def test_rejects_anything_else(self, value):
        assert parse_version(value) is None


class TestSemverSatisfies:

    def test_bare_exact_match(self):
        assert semver_satisfies("1.2.3", "1.2.3") is True

    def test_exact_mismatch(self):
        assert semver_satisfies("1.2.3", "1.2.4") is False

    def test_explicit_equals(self):
        assert semver_satisfies("1.2.3", "=1.2.3") is True

    def test_gte_equal(self):
        assert semver_satisfies("1.2.3", ">=1.2.3") is True

    def test_gte_not_satisfied(self):
        assert semver_satisfies("1.2.2", ">=1.2.3") is False

    def test_gt_boundary_is_exclusive(self):
        assert semver_satisfies("1.2.3", ">1.2.3") is False

    def test_lt_satisfied(self):
        assert semver_satisfies("1.2.2", "<1.2.3") is True

    def test_lte_satisfied(self):
        assert semver_satisfies("1.2.3", "<=1.2.3") is True

    def test_combined_range_inside(self):
        assert semver_satisfies("1.2.3", ">=1.0.0 <2.0.0") is True

    def test_combined_range_upper_bound(self):
        assert semver_satisfies("2.0.0", ">=1.0.0 <2.0.0") is False

    def test_numeric_not_string_comparison(self):
        assert semver_satisfies("1.10.0", ">1.9.0") is True

    def test_invalid_version(self):
        assert semver_satisfies("abc", ">=1.0.0") is False

    @pytest.mark.parametrize("range_expression", [">=abc", ">=1.0", "=>1.0.0", ">=1.0.0 <two", "", "   "])
    def test_malformed_range_fails_closed(self, range_expression):
        assert semver_satisfies("1.2.3", range_expression) is False
