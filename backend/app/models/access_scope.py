"""사용자별 프로젝트 권한(issueadmin 등) 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class ProjectPermission(Base):
    __tablename__ = "project_permission"

    permission_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    project_kee = Column(String(400), nullable=False)
    permission = Column(String(50), nullable=False)  # issueadmin
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="project_permissions")

    __table_args__ = (
        UniqueConstraint("user_id", "project_kee", "permission", name="uq_project_permission"),
    )
