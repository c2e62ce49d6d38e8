"""기술 부채(technical debt) 시간 포맷과 룰별 특성(characteristic) 조회를 담당합니다."""

from typing import Optional, Tuple

from app.config import settings
from app.models.rule import Rule
from app.services.i18n_service import I18n


def format_debt(i18n: I18n, locale: Optional[str], minutes: Optional[int]) -> Optional[str]:
    """분 단위 부채를 근무일 기준 ``1d 2h 30min`` 형식으로 변환한다."""
    if minutes is None:
        return None
    minutes = int(minutes)
    minutes_in_day = settings.HOURS_IN_DAY * 60
    days, rest = divmod(abs(minutes), minutes_in_day)
    hours, mins = divmod(rest, 60)

    parts = []
    if days:
        parts.append(i18n.message(locale, "duration.days", days))
    if hours:
        parts.append(i18n.message(locale, "duration.hours", hours))
    if mins or not parts:
        parts.append(i18n.message(locale, "duration.minutes", mins))
    text = " ".join(parts)
    return f"-{text}" if minutes < 0 else text


def rule_characteristics(rule: Optional[Rule]) -> Optional[Tuple[Optional[str], Optional[str]]]:
    """(characteristic, subCharacteristic) 이름. 요구사항이 비활성화된 룰이면 None."""
    if rule is None or rule.characteristic is None:
        return None
    sub = rule.characteristic
    if sub.parent is None:
        return sub.name, None
    return sub.parent.name, sub.name
