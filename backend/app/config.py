"""환경 변수 기반 애플리케이션 설정을 중앙에서 관리합니다."""

from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./changelog.db"
    SECRET_KEY: str = "change-me-to-a-random-secret-key"
    DEBUG: bool = True
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]
    LOG_LEVEL: str = "INFO"

    # JWT
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480

    # 날짜 필터(since/to)와 날짜 표시에 사용하는 기준 시간대
    TIME_ZONE: str = "UTC"

    # i18n
    DEFAULT_LOCALE: str = "en"
    SUPPORTED_LOCALES: List[str] = ["en", "ko"]

    # Changelog paging (boundary layer only)
    CHANGELOG_DEFAULT_PAGE_SIZE: int = 50
    CHANGELOG_MAX_PAGE_SIZE: int = 500

    # Technical debt: 1 work day = HOURS_IN_DAY hours
    HOURS_IN_DAY: int = 8

    class Config:
        # 실행 cwd와 무관하게 backend/.env를 로드한다.
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()
