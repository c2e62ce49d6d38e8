"""이슈 조회(show), 변경 이력(changelog), 상태 변경 API를 검증합니다."""

from app.services.issue_service import update_issue
from tests.conftest import auth_headers


def _record_admin_update(db, issue):
    update_issue(
        db,
        issue=issue,
        changes={"severity": "CRITICAL", "assignee": "marcel"},
        user_login="admin",
        created_at=1472724000000,
    )


def test_show_issue_context_for_anonymous(client, db, seed_issue):
    resp = client.get("/api/issues/show", params={"key": "ISSUE-1"})

    assert resp.status_code == 200
    issue = resp.json()["issue"]
    assert issue["key"] == "ISSUE-1"
    assert issue["componentLongName"] == "src/Foo.xoo"
    assert issue["componentQualifier"] == "FIL"
    assert issue["projectLongName"] == "Sample Project"
    assert issue["ruleName"] == "X One"
    assert issue["message"] == "X One"
    assert issue["status"] == "OPEN"
    assert issue["debt"] == "1h 30min"
    assert issue["characteristic"] == "Reliability"
    assert issue["subCharacteristic"] == "Exception handling"
    assert issue["actionPlanName"] == "Sprint 1"
    assert issue["reporter"] == "julien"
    assert issue["reporterName"] == "Julien"
    assert issue["creationDate"] == "2016-09-01T09:00:00+0000"
    assert "assignee" not in issue
    assert "resolution" not in issue
    assert issue["transitions"] == []
    assert issue["actions"] == []


def test_show_changelog_starts_with_created_entry(client, db, seed_issue):
    _record_admin_update(db, seed_issue)

    changelog = client.get("/api/issues/show", params={"key": "ISSUE-1"}).json()["issue"]["changelog"]

    assert len(changelog) == 2
    assert changelog[0]["diffs"] == ["Created"]
    assert changelog[0]["creationDate"] == "2016-09-01T09:00:00+0000"
    assert "userLogin" not in changelog[0]
    assert changelog[1]["userLogin"] == "admin"
    assert changelog[1]["userName"] == "Admin"
    assert changelog[1]["creationDate"] == "2016-09-01T10:00:00+0000"
    assert changelog[1]["diffs"] == ["severity changed from Major to Critical", "assignee set to Marcel"]


def test_show_transitions_and_actions_for_user(client, seed_issue):
    headers = auth_headers(client, "marcel")
    issue = client.get("/api/issues/show", params={"key": "ISSUE-1"}, headers=headers).json()["issue"]
    assert issue["transitions"] == ["confirm", "resolve"]
    assert issue["actions"] == ["comment", "assign", "assign_to_me", "plan"]


def test_show_transitions_and_actions_for_issue_admin(client, seed_users, seed_issue, grant_issue_admin):
    grant_issue_admin(seed_users["marcel"])
    headers = auth_headers(client, "marcel")
    issue = client.get("/api/issues/show", params={"key": "ISSUE-1"}, headers=headers).json()["issue"]
    assert issue["transitions"] == ["confirm", "resolve", "falsepositive"]
    assert issue["actions"] == ["comment", "assign", "assign_to_me", "plan", "set_severity"]


def test_show_unknown_issue(client, seed_issue):
    assert client.get("/api/issues/show", params={"key": "NOPE"}).status_code == 404


def test_show_requires_key(client):
    assert client.get("/api/issues/show").status_code == 400


def test_changelog_endpoint_with_date_filter(client, db, seed_issue):
    _record_admin_update(db, seed_issue)

    data = client.get("/api/issues/changelog", params={"issue": "ISSUE-1", "since": "2016-09-02"}).json()
    assert data["total"] == 0
    assert [entry["diffs"] for entry in data["changelog"]] == [["Created"]]

    data = client.get("/api/issues/changelog", params={"issue": "ISSUE-1", "to": "2016-09-01"}).json()
    assert data["total"] == 1
    assert len(data["changelog"]) == 2


def test_changelog_endpoint_rejects_inverted_range(client, seed_issue):
    resp = client.get("/api/issues/changelog", params={"issue": "ISSUE-1", "since": "2016-09-02", "to": "2016-09-01"})
    assert resp.status_code == 400


def test_changelog_endpoint_in_korean(client, db, seed_issue):
    _record_admin_update(db, seed_issue)
    data = client.get("/api/issues/changelog", params={"issue": "ISSUE-1", "locale": "ko"}).json()
    assert data["changelog"][0]["diffs"] == ["생성됨"]
    assert data["changelog"][1]["diffs"][0] == "심각도: 주요에서 심각(으)로 변경"


def test_transition_is_recorded_in_changelog(client, seed_issue):
    headers = auth_headers(client, "marcel")
    resp = client.post("/api/issues/do_transition", json={"issue": "ISSUE-1", "transition": "confirm"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"issue": "ISSUE-1", "changed": True}

    data = client.get("/api/issues/changelog", params={"issue": "ISSUE-1"}).json()
    assert data["total"] == 1
    assert data["changelog"][1]["userLogin"] == "marcel"
    assert data["changelog"][1]["diffs"] == ["status changed from Open to Confirmed"]


def test_invalid_transition(client, seed_issue):
    headers = auth_headers(client, "marcel")
    resp = client.post("/api/issues/do_transition", json={"issue": "ISSUE-1", "transition": "reopen"}, headers=headers)
    assert resp.status_code == 400


def test_falsepositive_requires_issue_admin(client, seed_issue):
    headers = auth_headers(client, "marcel")
    resp = client.post(
        "/api/issues/do_transition", json={"issue": "ISSUE-1", "transition": "falsepositive"}, headers=headers
    )
    assert resp.status_code == 400


def test_write_requires_login(client, seed_issue):
    resp = client.post("/api/issues/do_transition", json={"issue": "ISSUE-1", "transition": "confirm"})
    assert resp.status_code in (401, 403)


def test_assign_and_unassign(client, seed_issue):
    headers = auth_headers(client, "marcel")
    assert client.post("/api/issues/assign", json={"issue": "ISSUE-1", "assignee": "julien"}, headers=headers).json()["changed"]
    assert client.post("/api/issues/assign", json={"issue": "ISSUE-1"}, headers=headers).json()["changed"]

    diffs = [entry["diffs"] for entry in client.get("/api/issues/changelog", params={"issue": "ISSUE-1"}).json()["changelog"]]
    assert diffs[1] == ["assignee removed (was Julien)"]
    assert diffs[2] == ["assignee set to Julien"]


def test_assign_unknown_user(client, seed_issue):
    headers = auth_headers(client, "marcel")
    resp = client.post("/api/issues/assign", json={"issue": "ISSUE-1", "assignee": "ghost"}, headers=headers)
    assert resp.status_code == 404


def test_set_severity_requires_issue_admin(client, seed_issue):
    headers = auth_headers(client, "marcel")
    resp = client.post("/api/issues/set_severity", json={"issue": "ISSUE-1", "severity": "BLOCKER"}, headers=headers)
    assert resp.status_code == 403


def test_set_severity_as_admin(client, seed_issue):
    headers = auth_headers(client, "admin")
    resp = client.post("/api/issues/set_severity", json={"issue": "ISSUE-1", "severity": "BLOCKER"}, headers=headers)
    assert resp.status_code == 200
    resp = client.post("/api/issues/set_severity", json={"issue": "ISSUE-1", "severity": "BLOCKER"}, headers=headers)
    assert resp.json()["changed"] is False
    resp = client.post("/api/issues/set_severity", json={"issue": "ISSUE-1", "severity": "HUGE"}, headers=headers)
    assert resp.status_code == 400


def test_add_comment(client, seed_issue):
    headers = auth_headers(client, "marcel")
    resp = client.post(
        "/api/issues/add_comment", json={"issue": "ISSUE-1", "text": "<b>hi</b>\nthere"}, headers=headers
    )
    assert resp.status_code == 200
    comment = resp.json()
    assert comment["raw"] == "<b>hi</b>\nthere"
    assert comment["html"] == "&lt;b&gt;hi&lt;/b&gt;<br/>there"
    assert comment["userName"] == "Marcel"
    assert comment["updatable"] is True

    comments = client.get("/api/issues/show", params={"key": "ISSUE-1"}).json()["issue"]["comments"]
    assert len(comments) == 1
    assert comments[0]["updatable"] is False


def test_blank_comment_rejected(client, seed_issue):
    headers = auth_headers(client, "marcel")
    resp = client.post("/api/issues/add_comment", json={"issue": "ISSUE-1", "text": "  "}, headers=headers)
    assert resp.status_code == 400
