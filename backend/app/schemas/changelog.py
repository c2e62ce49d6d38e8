"""품질 프로파일 변경 이력 응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel
from typing import Dict, List, Optional


class Paging(BaseModel):
    pageIndex: int
    pageSize: int
    total: int


class ProfileChangeOut(BaseModel):
    date: str
    action: str
    authorLogin: Optional[str] = None
    authorName: Optional[str] = None
    severity: Optional[str] = None
    inheritance: Optional[str] = None
    ruleKey: Optional[str] = None
    ruleName: Optional[str] = None
    params: Optional[Dict[str, str]] = None
    diffs: List[str] = []


class ProfileChangelogOut(BaseModel):
    paging: Paging
    changelog: List[ProfileChangeOut]
