"""날짜(epoch millis) 변환, 날짜 문자열 포맷, 로케일 협상 등 공용 헬퍼입니다."""

import time
from datetime import datetime, timezone, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo

from app.config import settings

DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def reference_tz() -> tzinfo:
    return ZoneInfo(settings.TIME_ZONE)


def now_millis() -> int:
    return int(time.time() * 1000)


def to_epoch_millis(value: datetime) -> int:
    # DB의 naive datetime은 UTC로 저장된 값으로 간주한다.
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


def from_epoch_millis(millis: int, tz: Optional[tzinfo] = None) -> datetime:
    return datetime.fromtimestamp(millis / 1000, tz=tz or reference_tz())


def to_reference_datetime(value: Union[datetime, int], tz: Optional[tzinfo] = None) -> datetime:
    if isinstance(value, datetime):
        return from_epoch_millis(to_epoch_millis(value), tz)
    return from_epoch_millis(int(value), tz)


def format_datetime(value: Union[datetime, int, None], tz: Optional[tzinfo] = None) -> Optional[str]:
    """datetime 또는 epoch millis를 ``2016-09-01T10:00:00+0000`` 형식으로 변환한다."""
    if value is None:
        return None
    return to_reference_datetime(value, tz).strftime(DATETIME_FORMAT)


def resolve_locale(requested: Optional[str] = None, accept_language: Optional[str] = None) -> str:
    supported = [loc.lower() for loc in settings.SUPPORTED_LOCALES]
    candidates = []
    if requested:
        candidates.append(requested)
    if accept_language:
        # "ko-KR,ko;q=0.9,en;q=0.8" -> ["ko-KR", "ko", "en"]
        for part in accept_language.split(","):
            tag = part.split(";")[0].strip()
            if tag:
                candidates.append(tag)
    for candidate in candidates:
        lang = candidate.replace("_", "-").split("-")[0].lower()
        if lang in supported:
            return lang
    return settings.DEFAULT_LOCALE
