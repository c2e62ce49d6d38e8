"""서비스 레이어 패키지 초기화 모듈입니다."""

from app.services import (
    auth_service,
    change_storage,
    changelog_loader,
    changelog_presenter,
    diff_formatter,
    issue_service,
    profile_service,
)
