"""품질 프로파일과 프로파일 변경 이력(qprofile_changes) 모델 정의입니다."""

from sqlalchemy import BigInteger, Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class QualityProfile(Base):
    __tablename__ = "quality_profile"

    profile_id = Column(Integer, primary_key=True, autoincrement=True)
    kee = Column(String(255), unique=True, nullable=False)
    name = Column(String(100), nullable=False)
    language = Column(String(20), nullable=False)
    parent_kee = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    changes = relationship("QProfileChange", back_populates="profile", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_profile_language_name", "language", "name", unique=True),
    )


class QProfileChange(Base):
    __tablename__ = "qprofile_changes"

    change_id = Column(Integer, primary_key=True, autoincrement=True)
    kee = Column(String(40), unique=True, nullable=False)
    profile_kee = Column(String(255), ForeignKey("quality_profile.kee", ondelete="CASCADE"), nullable=False)
    change_type = Column(String(20), nullable=False)  # ACTIVATED/DEACTIVATED/UPDATED
    user_login = Column(String(100), nullable=True)  # 시스템 변경은 None
    change_data = Column(Text)  # JSON string: severity/inheritance/ruleKey/params
    created_at = Column(BigInteger, nullable=False)  # epoch millis

    profile = relationship("QualityProfile", back_populates="changes")

    __table_args__ = (
        Index("idx_qprofile_changes_profile", "profile_kee", "created_at"),
    )
