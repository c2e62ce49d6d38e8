import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from app.database import Base, get_db
from app.main import app
from app.models.access_scope import ProjectPermission
from app.models.issue import ActionPlan, Component, Issue
from app.models.quality_profile import QualityProfile
from app.models.rule import DebtCharacteristic, Rule
from app.models.user import User
from datetime import datetime

TEST_DB_URL = "sqlite:///./test_changelog.db"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seed_users(db):
    users = {
        "admin": User(login="admin", name="Admin", role="admin"),
        "marcel": User(login="marcel", name="Marcel", role="user"),
        "julien": User(login="julien", name="Julien", role="user"),
    }
    for u in users.values():
        db.add(u)
    db.commit()
    for u in users.values():
        db.refresh(u)
    return users


@pytest.fixture
def seed_rules(db):
    root = DebtCharacteristic(kee="RELIABILITY", name="Reliability")
    db.add(root)
    db.commit()
    sub = DebtCharacteristic(kee="EXCEPTION_HANDLING", name="Exception handling", parent_id=root.characteristic_id)
    db.add(sub)
    db.commit()
    rules = {
        "x1": Rule(rule_key="xoo:x1", name="X One", language="xoo", characteristic_id=sub.characteristic_id),
        "x2": Rule(rule_key="xoo:x2", name="X Two", language="xoo"),
    }
    for r in rules.values():
        db.add(r)
    db.commit()
    return rules


@pytest.fixture
def seed_profile(db, seed_rules):
    profile = QualityProfile(kee="XOO_P1", name="Sonar way", language="xoo")
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


@pytest.fixture
def seed_issue(db, seed_users, seed_rules):
    db.add_all([
        Component(kee="sample", long_name="Sample Project", qualifier="TRK", project_kee="sample"),
        Component(kee="sample:src/Foo.xoo", long_name="src/Foo.xoo", qualifier="FIL", project_kee="sample"),
        ActionPlan(kee="plan-1", name="Sprint 1", project_kee="sample"),
    ])
    issue = Issue(
        kee="ISSUE-1",
        component_kee="sample:src/Foo.xoo",
        project_kee="sample",
        rule_key="xoo:x1",
        line=42,
        severity="MAJOR",
        technical_debt=90,
        reporter="julien",
        action_plan_key="plan-1",
        created_at=datetime(2016, 9, 1, 9, 0, 0),
    )
    db.add(issue)
    db.commit()
    db.refresh(issue)
    return issue


@pytest.fixture
def grant_issue_admin(db):
    def grant(user: User, project_kee: str = "sample"):
        db.add(ProjectPermission(user_id=user.user_id, project_kee=project_kee, permission="issueadmin"))
        db.commit()
    return grant


def get_token(client, login: str) -> str:
    resp = client.post("/api/auth/login", json={"login": login})
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


def auth_headers(client, login: str) -> dict:
    return {"Authorization": f"Bearer {get_token(client, login)}"}
