"""since/to 날짜 필터를 조회 경계 타임스탬프로 변환하는 규칙을 검증합니다."""

from datetime import date, timezone
from zoneinfo import ZoneInfo

import pytest

from app.exceptions import InvalidArgumentError
from app.services.changelog_query import build_changelog_query, parse_date, start_of_day

SEPT_1_UTC = 1472688000000
SEPT_2_UTC = 1472774400000


def test_to_is_inclusive_and_becomes_next_day_start():
    query = build_changelog_query("XOO_P1", to="2016-09-01", tz=timezone.utc)
    assert query.to_excluded == SEPT_2_UTC
    assert query.from_included is None


def test_since_is_inclusive_start_of_day():
    query = build_changelog_query("XOO_P1", since="2016-09-01", tz=timezone.utc)
    assert query.from_included == SEPT_1_UTC
    assert query.to_excluded is None


def test_same_day_range_covers_one_full_day():
    query = build_changelog_query("XOO_P1", since="2016-09-01", to="2016-09-01", tz=timezone.utc)
    assert query.to_excluded - query.from_included == 24 * 60 * 60 * 1000


def test_no_dates_means_unbounded():
    query = build_changelog_query("XOO_P1")
    assert query.entity_ref == "XOO_P1"
    assert query.from_included is None
    assert query.to_excluded is None


def test_blank_dates_are_treated_as_omitted():
    query = build_changelog_query("XOO_P1", since="", to="  ")
    assert query.from_included is None
    assert query.to_excluded is None


def test_since_after_to_is_rejected():
    with pytest.raises(InvalidArgumentError) as exc_info:
        build_changelog_query("XOO_P1", since="2016-09-02", to="2016-09-01")
    assert exc_info.value.status_code == 400


@pytest.mark.parametrize("value", ["2016/09/01", "16-09-01", "2016-9-1", "2016-13-01", "2016-02-30", "yesterday"])
def test_malformed_dates_are_rejected(value):
    with pytest.raises(InvalidArgumentError):
        build_changelog_query("XOO_P1", since=value)
    with pytest.raises(InvalidArgumentError):
        parse_date(value, "to")


def test_missing_entity_is_rejected():
    with pytest.raises(InvalidArgumentError):
        build_changelog_query(None, since="2016-09-01")


def test_reference_time_zone_shifts_boundaries():
    seoul = ZoneInfo("Asia/Seoul")
    query = build_changelog_query("XOO_P1", since="2016-09-01", to="2016-09-01", tz=seoul)
    assert query.from_included == SEPT_1_UTC - 9 * 60 * 60 * 1000
    assert query.to_excluded == SEPT_2_UTC - 9 * 60 * 60 * 1000


def test_start_of_day_across_month_end():
    assert start_of_day(date(2016, 10, 1), timezone.utc) == SEPT_1_UTC + 30 * 24 * 60 * 60 * 1000


def test_largest_to_date_leaves_upper_bound_open():
    query = build_changelog_query("XOO_P1", since="2016-09-01", to="9999-12-31", tz=timezone.utc)
    assert query.from_included == SEPT_1_UTC
    assert query.to_excluded is None


def test_smallest_since_date_ahead_of_utc_leaves_lower_bound_open():
    query = build_changelog_query("XOO_P1", since="0001-01-01", to="2016-09-01", tz=ZoneInfo("Asia/Seoul"))
    assert query.from_included is None
    assert query.to_excluded == SEPT_2_UTC - 9 * 60 * 60 * 1000
