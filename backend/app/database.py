"""SQLAlchemy 엔진, 세션 팩토리, 선언형 Base와 요청 단위 세션 의존성을 제공합니다."""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from app.config import settings

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    # 요청마다 세션을 열고, 예외 여부와 관계없이 반드시 닫는다.
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
