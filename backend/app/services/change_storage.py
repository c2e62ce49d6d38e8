"""변경 이력 저장/조회 공용 기능을 제공하는 저장소 레이어입니다.

프로파일 변경(qprofile_changes)과 이슈 변경(issue_changes)을 JSON 문자열로 저장하고,
조회 시 Change 값 객체로 변환한다. 이력은 추가만 가능하며 수정/삭제 API는 없다.
"""

import json
import logging
import uuid
from typing import Any, Dict, List, Mapping, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from app.models.issue import IssueChange
from app.models.quality_profile import QProfileChange
from app.services.change_record import ABSENT, Change, ChangeType, Diff
from app.utils.helpers import now_millis

logger = logging.getLogger(__name__)


def _new_kee() -> str:
    return uuid.uuid4().hex


def _load_json(raw: Optional[str], kee: str) -> Dict[str, Any]:
    try:
        data = json.loads(raw or "{}")
    except json.JSONDecodeError:
        logger.warning("[changelog] unreadable change_data for %s", kee)
        return {}
    return data if isinstance(data, dict) else {}


def _diff_from_json(value: Any) -> Diff:
    # "new only" 값은 문자열, old/new 쌍은 {"old": .., "new": ..} 객체로 저장된다.
    if isinstance(value, dict) and ("old" in value or "new" in value):
        return Diff(old=value.get("old", ABSENT), new=value.get("new", ABSENT))
    return Diff(new=value)


def _diff_to_json(diff: Diff) -> Dict[str, Any]:
    out = {}
    if diff.has_old:
        out["old"] = diff.old
    if diff.has_new:
        out["new"] = diff.new
    return out


def _parse_diffs(raw: Mapping[str, Any]) -> Dict[str, Diff]:
    diffs = {}
    for key, value in raw.items():
        diff = _diff_from_json(value)
        if diff.is_noop:
            continue
        diffs[key] = diff
    return diffs


def _time_filtered(q: Query, column, from_included: Optional[int], to_excluded: Optional[int]) -> Query:
    if from_included is not None:
        q = q.filter(column >= from_included)
    if to_excluded is not None:
        q = q.filter(column < to_excluded)
    return q


class ProfileChangeStorage:
    def __init__(self, db: Session):
        self.db = db

    def query(
        self,
        profile_kee: str,
        from_included: Optional[int] = None,
        to_excluded: Optional[int] = None,
    ) -> Tuple[int, List[Change]]:
        base = self.db.query(QProfileChange).filter(QProfileChange.profile_kee == profile_kee)
        base = _time_filtered(base, QProfileChange.created_at, from_included, to_excluded)
        total = base.with_entities(func.count(QProfileChange.change_id)).scalar() or 0
        rows = base.order_by(QProfileChange.created_at.desc(), QProfileChange.change_id.desc()).all()
        return int(total), [self.to_change(row) for row in rows]

    @staticmethod
    def to_change(row: QProfileChange) -> Change:
        data = _load_json(row.change_data, row.kee)
        params = data.get("params") or {}
        return Change(
            id=row.kee,
            type=row.change_type,
            timestamp=int(row.created_at),
            actor=row.user_login,
            severity=data.get("severity"),
            inheritance=data.get("inheritance"),
            rule_key=data.get("ruleKey"),
            params=_parse_diffs(params) if isinstance(params, dict) else {},
        )


class IssueChangeStorage:
    def __init__(self, db: Session):
        self.db = db

    def query(
        self,
        issue_kee: str,
        from_included: Optional[int] = None,
        to_excluded: Optional[int] = None,
    ) -> Tuple[int, List[Change]]:
        base = self.db.query(IssueChange).filter(IssueChange.issue_kee == issue_kee)
        base = _time_filtered(base, IssueChange.created_at, from_included, to_excluded)
        total = base.with_entities(func.count(IssueChange.change_id)).scalar() or 0
        rows = base.order_by(IssueChange.created_at.desc(), IssueChange.change_id.desc()).all()
        return int(total), [self.to_change(row) for row in rows]

    @staticmethod
    def to_change(row: IssueChange) -> Change:
        return Change(
            id=row.kee,
            type=ChangeType.UPDATED,
            timestamp=int(row.created_at),
            actor=row.user_login,
            field_diffs=_parse_diffs(_load_json(row.change_data, row.kee)),
        )


def create_profile_change(
    db: Session,
    *,
    profile_kee: str,
    change_type: str,
    user_login: Optional[str] = None,
    severity: Optional[str] = None,
    inheritance: Optional[str] = None,
    rule_key: Optional[str] = None,
    params: Optional[Mapping[str, Any]] = None,
    created_at: Optional[int] = None,
) -> QProfileChange:
    if change_type not in ChangeType.ALL:
        raise ValueError(f"unknown change type: {change_type}")
    data: Dict[str, Any] = {}
    if severity is not None:
        data["severity"] = severity
    if inheritance is not None:
        data["inheritance"] = inheritance
    if rule_key is not None:
        data["ruleKey"] = rule_key
    if params:
        stored = {}
        for name, value in params.items():
            diff = value if isinstance(value, Diff) else Diff(new=value)
            if diff.is_noop:
                continue
            stored[name] = diff.new if not diff.has_old else _diff_to_json(diff)
        if stored:
            data["params"] = stored

    row = QProfileChange(
        kee=_new_kee(),
        profile_kee=profile_kee,
        change_type=change_type,
        user_login=user_login,
        change_data=json.dumps(data, ensure_ascii=False),
        created_at=created_at if created_at is not None else now_millis(),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def create_issue_change(
    db: Session,
    *,
    issue_kee: str,
    diffs: Mapping[str, Diff],
    user_login: Optional[str] = None,
    created_at: Optional[int] = None,
) -> Optional[IssueChange]:
    stored = {name: _diff_to_json(diff) for name, diff in diffs.items() if not diff.is_noop}
    if not stored:
        # 실제 변경이 없는 diff는 기록하지 않는다.
        return None
    row = IssueChange(
        kee=_new_kee(),
        issue_kee=issue_kee,
        user_login=user_login,
        change_data=json.dumps(stored, ensure_ascii=False),
        created_at=created_at if created_at is not None else now_millis(),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row
