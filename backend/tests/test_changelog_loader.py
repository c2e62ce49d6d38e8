"""ChangelogLoader를 stub 협력 객체로 검증합니다 (엔티티 확인, 정렬, 표시명 보완)."""

import logging
from types import SimpleNamespace

import pytest

from app.exceptions import LookupFailure, NotFoundError
from app.services.change_record import Change, ChangelogQuery, ChangeType
from app.services.changelog_loader import ChangelogLoader


class StubResolver:
    def __init__(self, known):
        self.known = known

    def resolve(self, ref):
        if ref not in self.known:
            raise NotFoundError(f"not found: {ref}")
        return SimpleNamespace(kee=ref)


class StubStorage:
    def __init__(self, total, changes):
        self.total = total
        self.changes = changes
        self.calls = []

    def query(self, entity_id, from_included=None, to_excluded=None):
        self.calls.append((entity_id, from_included, to_excluded))
        return self.total, list(self.changes)


class StubUserLookup:
    def __init__(self, names=None, fail=False):
        self.names = names or {}
        self.fail = fail
        self.calls = []

    def by_logins(self, logins):
        self.calls.append(set(logins))
        if self.fail:
            raise LookupFailure("users unavailable")
        return {login: self.names[login] for login in logins if login in self.names}


class StubRuleLookup:
    def by_keys(self, keys):
        return {key: "X One" for key in keys if key == "xoo:x1"}


def _change(kee, ts, actor=None, rule_key=None):
    return Change(id=kee, type=ChangeType.ACTIVATED, timestamp=ts, actor=actor, rule_key=rule_key)


def test_load_passes_bounds_and_keeps_storage_order():
    storage = StubStorage(10, [_change("C2", 1500000000010), _change("C1", 1500000000000)])
    loader = ChangelogLoader(StubResolver({"XOO_P1"}), storage)

    result = loader.load(ChangelogQuery("XOO_P1", from_included=1, to_excluded=2))

    assert storage.calls == [("XOO_P1", 1, 2)]
    assert result.total == 10
    assert [c.id for c in result.changes] == ["C2", "C1"]
    timestamps = [c.timestamp for c in result.changes]
    assert timestamps == sorted(timestamps, reverse=True)


def test_empty_entity():
    loader = ChangelogLoader(StubResolver({"XOO_P1"}), StubStorage(0, []))
    result = loader.load(ChangelogQuery("XOO_P1"))
    assert result.total == 0
    assert result.changes == ()


def test_unknown_entity_raises_without_storage_access():
    storage = StubStorage(1, [_change("C1", 1)])
    loader = ChangelogLoader(StubResolver(set()), storage)
    with pytest.raises(NotFoundError):
        loader.load(ChangelogQuery("UNKNOWN"))
    assert storage.calls == []


def test_actor_and_rule_names_are_completed():
    storage = StubStorage(2, [_change("C2", 2, actor="marcel", rule_key="xoo:x1"), _change("C1", 1)])
    users = StubUserLookup({"marcel": "Marcel"})
    loader = ChangelogLoader(StubResolver({"XOO_P1"}), storage, users, StubRuleLookup())

    result = loader.load(ChangelogQuery("XOO_P1"))

    assert result.changes[0].actor_display_name == "Marcel"
    assert result.changes[0].rule_name == "X One"
    assert result.changes[1].actor_display_name is None
    assert users.calls == [{"marcel"}]


def test_no_actor_means_no_user_lookup():
    users = StubUserLookup({"marcel": "Marcel"})
    loader = ChangelogLoader(StubResolver({"XOO_P1"}), StubStorage(1, [_change("C1", 1)]), users)
    result = loader.load(ChangelogQuery("XOO_P1"))
    assert users.calls == []
    assert result.changes[0].actor is None


def test_lookup_failure_is_logged_not_raised(caplog):
    storage = StubStorage(1, [_change("C1", 1, actor="marcel")])
    loader = ChangelogLoader(StubResolver({"XOO_P1"}), storage, StubUserLookup(fail=True))
    with caplog.at_level(logging.WARNING):
        result = loader.load(ChangelogQuery("XOO_P1"))
    assert result.changes[0].actor == "marcel"
    assert result.changes[0].actor_display_name is None
    assert "name lookup failed" in caplog.text
