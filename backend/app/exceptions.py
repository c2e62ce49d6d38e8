"""Changelog 조회 흐름에서 사용하는 오류 분류입니다.

NotFoundError/InvalidArgumentError는 HTTPException을 상속하므로 서비스 레이어에서
직접 raise 하면 FastAPI가 404/400 응답으로 변환합니다. LookupFailure는 내부 전용이며
호출 측에서 로그만 남기고 복구합니다.
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class InvalidArgumentError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class LookupFailure(Exception):
    """사용자/룰 표시명 조회 실패. 응답을 중단시키지 않는다."""
