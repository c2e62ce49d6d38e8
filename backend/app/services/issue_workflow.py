"""이슈 상태 전이(workflow)와 사용자별 가능 액션 목록을 계산합니다."""

from typing import Callable, Dict, List, Optional, Tuple

from app.models.issue import Issue
from app.models.user import User

OPEN = "OPEN"
CONFIRMED = "CONFIRMED"
REOPENED = "REOPENED"
RESOLVED = "RESOLVED"
CLOSED = "CLOSED"

FIXED = "FIXED"
FALSE_POSITIVE = "FALSE-POSITIVE"

# 선언 순서가 응답 순서다.
TRANSITIONS: List[Dict] = [
    {"key": "confirm", "from": (OPEN, REOPENED), "to": CONFIRMED, "resolution": None, "issue_admin": False},
    {"key": "unconfirm", "from": (CONFIRMED,), "to": REOPENED, "resolution": None, "issue_admin": False},
    {"key": "reopen", "from": (RESOLVED,), "to": REOPENED, "resolution": None, "issue_admin": False},
    {"key": "resolve", "from": (OPEN, REOPENED, CONFIRMED), "to": RESOLVED, "resolution": FIXED, "issue_admin": False},
    {
        "key": "falsepositive",
        "from": (OPEN, REOPENED, CONFIRMED),
        "to": RESOLVED,
        "resolution": FALSE_POSITIVE,
        "issue_admin": True,
    },
]


# 미해결 이슈에 추가로 노출할 액션. (키, 조건) 순서대로 기본 액션 뒤에 붙는다.
_EXTRA_ACTIONS: List[Tuple[str, Callable[[Issue], bool]]] = []


def register_action(key: str, condition: Optional[Callable[[Issue], bool]] = None):
    if any(existing == key for existing, _ in _EXTRA_ACTIONS):
        raise ValueError(f"action already registered: {key}")
    _EXTRA_ACTIONS.append((key, condition or (lambda issue: True)))


def unregister_action(key: str):
    _EXTRA_ACTIONS[:] = [(existing, cond) for existing, cond in _EXTRA_ACTIONS if existing != key]


def find_transition(key: str) -> Optional[Dict]:
    return next((t for t in TRANSITIONS if t["key"] == key), None)


def list_transitions(issue: Issue, user: Optional[User], is_issue_admin: bool = False) -> List[str]:
    if user is None:
        return []
    keys = []
    for transition in TRANSITIONS:
        if issue.status not in transition["from"]:
            continue
        if transition["issue_admin"] and not is_issue_admin:
            continue
        keys.append(transition["key"])
    return keys


def list_actions(issue: Issue, user: Optional[User], is_issue_admin: bool = False) -> List[str]:
    if user is None:
        return []
    actions = ["comment"]
    if issue.resolution is None:
        actions.append("assign")
        if user.login != issue.assignee:
            actions.append("assign_to_me")
        actions.append("plan")
        if is_issue_admin:
            actions.append("set_severity")
        actions.extend(key for key, condition in _EXTRA_ACTIONS if condition(issue))
    return actions
