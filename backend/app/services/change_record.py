"""변경 이력 한 건(Change)과 조회 조건/결과를 표현하는 불변 값 객체입니다.

Change는 프로파일 룰 활성화 이벤트와 이슈 필드 변경을 모두 담는다. 프로파일 전용 필드
(severity, inheritance, rule_key, rule_name, params)와 이슈 전용 필드(field_diffs)는
서로 다른 그룹으로 나뉘며, 해당하지 않는 그룹은 비어 있다.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple


class _Absent:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (_Absent, ())


# 값이 "없음"(필드 자체가 없음)을 뜻한다. None은 "명시적 null"로 구분한다.
ABSENT = _Absent()


class ChangeType:
    ACTIVATED = "ACTIVATED"
    DEACTIVATED = "DEACTIVATED"
    UPDATED = "UPDATED"

    ALL = (ACTIVATED, DEACTIVATED, UPDATED)


@dataclass(frozen=True)
class Diff:
    old: Any = ABSENT
    new: Any = ABSENT

    @property
    def has_old(self) -> bool:
        return self.old is not ABSENT

    @property
    def has_new(self) -> bool:
        return self.new is not ABSENT

    @property
    def is_noop(self) -> bool:
        return self.has_old and self.has_new and self.old == self.new


def is_blank(value: Any) -> bool:
    """ABSENT, None, 빈 문자열은 표시할 값이 없는 것으로 본다."""
    return value is ABSENT or value is None or value == ""


def _freeze(name: str, diffs: Optional[Mapping[str, Any]]) -> Mapping[str, Diff]:
    frozen = {}
    for key, value in (diffs or {}).items():
        diff = value if isinstance(value, Diff) else Diff(new=value)
        if diff.is_noop:
            raise ValueError(f"{name}[{key!r}] records identical old/new values")
        frozen[key] = diff
    return MappingProxyType(frozen)


@dataclass(frozen=True)
class Change:
    id: str
    type: str
    timestamp: int
    actor: Optional[str] = None
    actor_display_name: Optional[str] = None
    # profile activation
    severity: Optional[str] = None
    inheritance: Optional[str] = None
    rule_key: Optional[str] = None
    rule_name: Optional[str] = None
    params: Mapping[str, Diff] = field(default_factory=dict)
    # issue update
    field_diffs: Mapping[str, Diff] = field(default_factory=dict)

    # 읽기 전용 매핑을 담으므로 해시하지 않는다. 비교(==)는 가능하다.
    __hash__ = None

    def __post_init__(self):
        if not self.id:
            raise ValueError("Change.id is required")
        if not self.type:
            raise ValueError("Change.type is required")
        if self.timestamp is None:
            raise ValueError("Change.timestamp is required")
        object.__setattr__(self, "params", _freeze("params", self.params))
        object.__setattr__(self, "field_diffs", _freeze("field_diffs", self.field_diffs))


@dataclass(frozen=True)
class ChangelogQuery:
    entity_ref: Any
    from_included: Optional[int] = None
    to_excluded: Optional[int] = None


@dataclass(frozen=True)
class ChangelogResult:
    total: int
    changes: Tuple[Change, ...] = ()

    __hash__ = None

    def __post_init__(self):
        object.__setattr__(self, "changes", tuple(self.changes))

    @classmethod
    def empty(cls) -> "ChangelogResult":
        return cls(total=0, changes=())
