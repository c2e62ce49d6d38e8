"""엔티티(프로파일/이슈)를 확인한 뒤 기간 조건에 맞는 변경 이력과 전체 건수를 조회합니다.

Loader는 자체 페이징을 하지 않는다. 필터링된 전체 결과를 최신순으로 돌려주고,
페이지 크기 제한은 경계(router) 레이어가 결정한다.
"""

import logging
from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol, Tuple

from app.exceptions import LookupFailure
from app.services.change_record import Change, ChangelogQuery, ChangelogResult

logger = logging.getLogger(__name__)


class EntityResolver(Protocol):
    def resolve(self, entity_ref: Any) -> Any:
        ...


class ChangeStorage(Protocol):
    def query(
        self, entity_id: str, from_included: Optional[int] = None, to_excluded: Optional[int] = None
    ) -> Tuple[int, List[Change]]:
        ...


class ChangelogLoader:
    def __init__(self, resolver: EntityResolver, storage: ChangeStorage, user_lookup=None, rule_lookup=None):
        self.resolver = resolver
        self.storage = storage
        self.user_lookup = user_lookup
        self.rule_lookup = rule_lookup

    def load(self, query: ChangelogQuery) -> ChangelogResult:
        # 존재하지 않는 엔티티면 resolver가 NotFoundError를 던진다.
        entity = self.resolver.resolve(query.entity_ref)
        total, changes = self.storage.query(entity.kee, query.from_included, query.to_excluded)
        if not changes:
            return ChangelogResult(total=total, changes=())
        return ChangelogResult(total=total, changes=tuple(self._complete_names(changes)))

    def _complete_names(self, changes: List[Change]) -> List[Change]:
        logins = {c.actor for c in changes if c.actor and not c.actor_display_name}
        rule_keys = {c.rule_key for c in changes if c.rule_key and not c.rule_name}
        user_names = _safe_lookup(self.user_lookup.by_logins if self.user_lookup else None, logins, "user")
        rule_names = _safe_lookup(self.rule_lookup.by_keys if self.rule_lookup else None, rule_keys, "rule")
        if not user_names and not rule_names:
            return list(changes)

        completed = []
        for change in changes:
            updates = {}
            if change.actor and not change.actor_display_name and change.actor in user_names:
                updates["actor_display_name"] = user_names[change.actor]
            if change.rule_key and not change.rule_name and change.rule_key in rule_names:
                updates["rule_name"] = rule_names[change.rule_key]
            completed.append(replace(change, **updates) if updates else change)
        return completed


def _safe_lookup(fn: Optional[Callable[[Iterable[str]], Dict[str, str]]], keys: set, kind: str) -> Dict[str, str]:
    if fn is None or not keys:
        return {}
    try:
        return fn(keys)
    except LookupFailure as exc:
        logger.warning("[changelog] %s name lookup failed for %s: %s", kind, sorted(keys), exc)
        return {}
