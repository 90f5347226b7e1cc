"""
Unit tests for field normalizers
"""
import pytest
from datetime import datetime, timedelta, timezone
from pathlib import Path
import sys

# Add cli directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "cli"))

from conversion.normalizers import (
    compact_date_token,
    keywordize,
    normalize_date,
    normalize_recurrence,
    org_tag_annotation,
    parse_timestamp,
    slugify,
    split_tags,
)


class TestNormalizeRecurrence:
    @pytest.mark.parametrize("raw, expected", [
        ("DAILY", "+1d"),
        ("daily", "+1d"),
        ("RRULE:FREQ=DAILY;INTERVAL=1", "+1d"),
        ("Every weekday", ".+1d"),
        ("FREQ=WEEKLY;INTERVAL=1", "+1w"),
        ("monthly", "+1m"),
        ("Yearly", "+1y"),
    ])
    def test_keyword_table(self, raw, expected):
        assert normalize_recurrence(raw) == expected

    def test_weekday_keyword_wins_over_weekly(self):
        """WEEKDAY is listed before WEEKLY, so a value containing both maps to .+1d"""
        assert normalize_recurrence("weekday or weekly") == ".+1d"

    @pytest.mark.parametrize("raw, expected", [
        ("Every 2 days", "+2d"),
        ("every 3 weeks", "+3w"),
        ("6 months", "+6m"),
        ("1 year", "+1y"),
    ])
    def test_numbered_interval(self, raw, expected):
        assert normalize_recurrence(raw) == expected

    @pytest.mark.parametrize("raw, expected", [
        ("every Monday", ".+1w"),
        ("Every 2 Tuesday", ".+2w"),
        ("sunday", ".+1w"),
    ])
    def test_weekday_names(self, raw, expected):
        assert normalize_recurrence(raw) == expected

    def test_unknown_rule_is_returned_unchanged(self):
        assert normalize_recurrence("whenever I feel like it") == "whenever I feel like it"

    @pytest.mark.parametrize("raw", ["", "   ", None])
    def test_empty_is_none(self, raw):
        assert normalize_recurrence(raw) is None


class TestNormalizeDate:
    @pytest.mark.parametrize("raw", [
        "2024-01-15T09:00:00Z",
        "2024-01-15T09:00:00+0000",
        "2024-01-15T09:00:00+00:00",
        "2024-01-15T09:00:42.123+0000",
    ])
    def test_iso_variants(self, raw):
        assert normalize_date(raw) == "2024-01-15 09:00"

    def test_no_zone_conversion(self):
        assert normalize_date("2024-01-15T09:00:00+0800") == "2024-01-15 09:00"

    def test_date_only(self):
        assert normalize_date("2024-01-15") == "2024-01-15 00:00"

    def test_unparseable_passes_through(self):
        assert normalize_date("next tuesday-ish") == "next tuesday-ish"

    @pytest.mark.parametrize("raw", ["", None])
    def test_empty_is_none(self, raw):
        assert normalize_date(raw) is None

    def test_parse_timestamp_keeps_offset(self):
        parsed = parse_timestamp("2024-01-15T09:00:00+0800")
        assert parsed == datetime(2024, 1, 15, 9, 0, tzinfo=timezone(timedelta(hours=8)))

    def test_parse_timestamp_invalid(self):
        assert parse_timestamp("garbage") is None


class TestSlugs:
    def test_slugify_strips_diacritics_and_punctuation(self):
        assert slugify("Café déjà vu!") == "cafe-deja-vu"

    def test_slugify_collapses_runs_and_trims(self):
        assert slugify("  --Hello,   World__  ") == "hello-world"

    def test_slugify_empty(self):
        assert slugify("") == ""
        assert slugify("!!!") == ""

    def test_keywordize_removes_separators(self):
        assert keywordize("Home Office") == "homeoffice"
        assert keywordize("Ñandú-2") == "nandu2"
        assert keywordize("---") == ""

    def test_compact_date_token_drops_seconds(self):
        assert compact_date_token(datetime(2024, 1, 15, 9, 30, 45)) == "20240115T093000"


class TestTags:
    def test_split_tags_trims_and_filters(self):
        assert split_tags(" work, ,home office ,") == ["work", "home office"]
        assert split_tags(None) == []

    def test_org_tag_annotation(self):
        assert org_tag_annotation(["work", "home  office"]) == ":work:home_office:"

    def test_org_tag_annotation_empty(self):
        assert org_tag_annotation([]) == ""
        assert org_tag_annotation(["", "  "]) == ""
