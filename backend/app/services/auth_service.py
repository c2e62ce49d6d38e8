"""로그인 사용자 확인과 토큰 발급을 담당합니다. 담당자 지정도 같은 활성 사용자 규칙을 사용합니다."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from app.models.user import User
from app.config import settings

ALGORITHM = "HS256"


def find_active_user(db: Session, login: Optional[str]) -> Optional[User]:
    if not login:
        return None
    return db.query(User).filter(User.login == login, User.is_active == True).first()


def create_access_token(user: User) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    # 변경 이력의 작성자는 login으로 기록되므로 토큰에도 함께 싣는다.
    payload = {"sub": str(user.user_id), "login": user.login, "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def mock_sso_login(db: Session, login: str) -> User:
    user = find_active_user(db, login)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"로그인 '{login}'에 해당하는 활성 사용자를 찾을 수 없습니다.",
        )
    return user
