"""사용자 로그인/룰 키를 표시명으로 변환하는 조회 서비스입니다.

조회 실패(DB 오류 등)는 LookupFailure로 감싸서 던지고, 호출 측은 로그만 남긴 뒤
원래 값으로 대체한다. 인스턴스는 요청 단위로 생성되며 조회 결과를 캐시한다.
"""

from typing import Dict, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import LookupFailure
from app.models.rule import Rule
from app.models.user import User


class UserLookup:
    def __init__(self, db: Session):
        self.db = db
        self._names: Dict[str, Optional[str]] = {}

    def by_logins(self, logins: Iterable[str]) -> Dict[str, str]:
        wanted = {login for login in logins if login}
        missing = [login for login in wanted if login not in self._names]
        if missing:
            try:
                rows = self.db.query(User.login, User.name).filter(User.login.in_(missing)).all()
            except SQLAlchemyError as exc:
                raise LookupFailure(f"user lookup failed: {exc}") from exc
            found = {row.login: row.name for row in rows}
            for login in missing:
                self._names[login] = found.get(login)
        return {login: self._names[login] for login in wanted if self._names.get(login)}

    def by_login(self, login: Optional[str]) -> Optional[str]:
        if not login:
            return None
        return self.by_logins([login]).get(login)


class RuleLookup:
    def __init__(self, db: Session):
        self.db = db
        self._names: Dict[str, Optional[str]] = {}

    def by_keys(self, rule_keys: Iterable[str]) -> Dict[str, str]:
        wanted = {key for key in rule_keys if key}
        missing = [key for key in wanted if key not in self._names]
        if missing:
            try:
                rows = self.db.query(Rule.rule_key, Rule.name).filter(Rule.rule_key.in_(missing)).all()
            except SQLAlchemyError as exc:
                raise LookupFailure(f"rule lookup failed: {exc}") from exc
            found = {row.rule_key: row.name for row in rows}
            for key in missing:
                self._names[key] = found.get(key)
        return {key: self._names[key] for key in wanted if self._names.get(key)}

    def by_key(self, rule_key: Optional[str]) -> Optional[str]:
        if not rule_key:
            return None
        return self.by_keys([rule_key]).get(rule_key)
