import pytest
from sqlalchemy.exc import OperationalError

from app.exceptions import LookupFailure
from app.services.lookup_service import RuleLookup, UserLookup


def test_user_lookup(db, seed_users):
    lookup = UserLookup(db)
    assert lookup.by_logins(["marcel", "ghost", ""]) == {"marcel": "Marcel"}
    assert lookup.by_login("julien") == "Julien"
    assert lookup.by_login(None) is None


def test_rule_lookup(db, seed_rules):
    lookup = RuleLookup(db)
    assert lookup.by_keys(["xoo:x1", "xoo:x2", "xoo:x9"]) == {"xoo:x1": "X One", "xoo:x2": "X Two"}
    assert lookup.by_key("xoo:x9") is None


def test_database_error_becomes_lookup_failure(db, seed_users, monkeypatch):
    def broken_query(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(db, "query", broken_query)
    with pytest.raises(LookupFailure):
        UserLookup(db).by_login("marcel")
