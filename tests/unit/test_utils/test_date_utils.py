# tests/unit/test_utils/test_date_utils.py

"""Tests for date_utils: release-year extraction from store date strings."""

import pytest

from appcatalog.utils.date_utils import parse_release_year


class TestParseReleaseYear:
    """Tests for parse_release_year()."""

    @pytest.mark.parametrize(
        "date_str, year",
        [
            ("10 Oct, 2007", 2007),
            ("Apr 18, 2011", 2011),
            ("21 August, 2012", 2012),
            ("August 21, 2012", 2012),
            ("21.08.2012", 2012),
            ("2012-08-21", 2012),
            ("2012/08/21", 2012),
            ("21-08-2012", 2012),
            ("Aug 2012", 2012),
            ("November 2019", 2019),
        ],
    )
    def test_store_formats(self, date_str, year):
        assert parse_release_year(date_str) == year

    def test_bare_year(self):
        """A 4-digit year is returned unchanged."""
        assert parse_release_year("2004") == 2004

    def test_unix_timestamp(self):
        assert parse_release_year("1587646884") == 2020

    def test_surrounding_whitespace(self):
        assert parse_release_year("  10 Oct, 2007 ") == 2007

    @pytest.mark.parametrize("date_str", [None, "", "   ", "Coming soon", "Q4 2025", "To be announced"])
    def test_unparseable_is_zero(self, date_str):
        assert parse_release_year(date_str) == 0
