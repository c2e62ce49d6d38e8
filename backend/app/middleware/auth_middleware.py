"""JWT Bearer 토큰을 해석해 요청 사용자를 주입하는 의존성입니다.

변경 이력 조회는 익명으로도 가능하므로 get_optional_user를 쓰고, 이슈 변경 API는
get_current_user로 로그인을 요구한다.
"""

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from jose import JWTError, jwt
from app.database import get_db
from app.models.user import User
from app.config import settings

security = HTTPBearer()

ALGORITHM = "HS256"


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="유효하지 않거나 만료된 토큰입니다.",
        )


def _active_user(db: Session, payload: dict) -> Optional[User]:
    user_id = payload.get("sub")
    if user_id is None:
        return None
    return db.query(User).filter(User.user_id == int(user_id), User.is_active == True).first()


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    user = _active_user(db, decode_token(credentials.credentials))
    if not user:
        raise HTTPException(status_code=401, detail="사용자를 찾을 수 없거나 비활성 상태입니다.")
    return user


def get_optional_user(
    credentials: HTTPAuthorizationCredentials = Depends(HTTPBearer(auto_error=False)),
    db: Session = Depends(get_db),
) -> Optional[User]:
    if credentials is None:
        return None
    try:
        payload = decode_token(credentials.credentials)
    except HTTPException:
        # 만료/위조 토큰은 익명 사용자로 취급한다.
        return None
    return _active_user(db, payload)
