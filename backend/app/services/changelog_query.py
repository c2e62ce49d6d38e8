"""since/to 날짜 필터를 저장소 조회용 타임스탬프 경계로 변환합니다.

사용자에게 ``to`` 는 포함(inclusive) 날짜이지만, 저장소 조회에서는 다음 날 00:00을
배타(exclusive) 상한으로 사용한다. 따라서 ``to`` 날짜 하루 전체가 결과에 포함된다.
"""

import re
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any, Optional

from app.exceptions import InvalidArgumentError
from app.services.change_record import ChangelogQuery
from app.utils.helpers import reference_tz, to_epoch_millis

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
DATE_FORMAT = "%Y-%m-%d"


def parse_date(value: str, param: str = "date") -> date:
    if not DATE_PATTERN.match(value):
        raise InvalidArgumentError(f"'{param}' 값 '{value}'은(는) YYYY-MM-DD 형식이 아닙니다.")
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        raise InvalidArgumentError(f"'{param}' 값 '{value}'은(는) 올바른 날짜가 아닙니다.")


def start_of_day(day: date, tz: tzinfo) -> int:
    return to_epoch_millis(datetime.combine(day, time.min, tzinfo=tz))


def _bound(day: Optional[date], offset_days: int, tz: tzinfo) -> Optional[int]:
    # 표현 가능한 날짜 범위를 벗어나는 경계(예: to=9999-12-31의 다음 날)는 제한 없음으로 본다.
    if day is None:
        return None
    try:
        return start_of_day(day + timedelta(days=offset_days), tz)
    except OverflowError:
        return None


def _optional_date(value: Optional[str], param: str) -> Optional[date]:
    if value is None or not value.strip():
        return None
    return parse_date(value.strip(), param)


def build_changelog_query(
    entity_ref: Any,
    since: Optional[str] = None,
    to: Optional[str] = None,
    tz: Optional[tzinfo] = None,
) -> ChangelogQuery:
    if entity_ref is None:
        raise InvalidArgumentError("조회 대상이 지정되지 않았습니다.")
    tz = tz or reference_tz()
    since_day = _optional_date(since, "since")
    to_day = _optional_date(to, "to")
    if since_day is not None and to_day is not None and since_day > to_day:
        raise InvalidArgumentError(f"'since'({since_day})가 'to'({to_day})보다 늦습니다.")

    from_included = _bound(since_day, 0, tz)
    to_excluded = _bound(to_day, 1, tz)
    return ChangelogQuery(entity_ref=entity_ref, from_included=from_included, to_excluded=to_excluded)
