"""Issue 조회/변경 요청 및 응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel
from typing import List, Optional


class IssueChangelogEntryOut(BaseModel):
    userLogin: Optional[str] = None
    userName: Optional[str] = None
    creationDate: str
    fCreationDate: Optional[str] = None
    diffs: List[str] = []


class IssueChangelogOut(BaseModel):
    total: int
    changelog: List[IssueChangelogEntryOut]


class IssueCommentOut(BaseModel):
    key: str
    userLogin: Optional[str] = None
    userName: Optional[str] = None
    raw: str
    html: str
    createdAt: Optional[str] = None
    fCreatedAge: Optional[str] = None
    updatable: bool = False


class IssueDetailOut(BaseModel):
    key: str
    component: str
    componentLongName: Optional[str] = None
    componentQualifier: Optional[str] = None
    project: Optional[str] = None
    projectLongName: Optional[str] = None
    rule: str
    ruleName: Optional[str] = None
    line: Optional[int] = None
    message: Optional[str] = None
    resolution: Optional[str] = None
    status: str
    severity: Optional[str] = None
    author: Optional[str] = None
    actionPlan: Optional[str] = None
    actionPlanName: Optional[str] = None
    debt: Optional[str] = None
    characteristic: Optional[str] = None
    subCharacteristic: Optional[str] = None
    assignee: Optional[str] = None
    assigneeName: Optional[str] = None
    reporter: Optional[str] = None
    reporterName: Optional[str] = None
    creationDate: Optional[str] = None
    fCreationDate: Optional[str] = None
    updateDate: Optional[str] = None
    fUpdateDate: Optional[str] = None
    fUpdateAge: Optional[str] = None
    closeDate: Optional[str] = None
    fCloseDate: Optional[str] = None
    transitions: List[str] = []
    actions: List[str] = []
    comments: List[IssueCommentOut] = []
    changelog: List[IssueChangelogEntryOut] = []


class IssueShowOut(BaseModel):
    issue: IssueDetailOut


class TransitionRequest(BaseModel):
    issue: str
    transition: str


class AssignRequest(BaseModel):
    issue: str
    assignee: Optional[str] = None


class SetSeverityRequest(BaseModel):
    issue: str
    severity: str


class AddCommentRequest(BaseModel):
    issue: str
    text: str


class IssueChangeResult(BaseModel):
    issue: str
    changed: bool
