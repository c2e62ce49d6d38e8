"""Issue 도메인(컴포넌트, 액션 플랜, 이슈, 코멘트, 변경 이력)의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import BigInteger, Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Component(Base):
    __tablename__ = "components"

    component_id = Column(Integer, primary_key=True, autoincrement=True)
    kee = Column(String(400), unique=True, nullable=False)
    long_name = Column(String(2000))
    qualifier = Column(String(10), nullable=False)  # TRK/DIR/FIL
    project_kee = Column(String(400), nullable=True)


class ActionPlan(Base):
    __tablename__ = "action_plans"

    action_plan_id = Column(Integer, primary_key=True, autoincrement=True)
    kee = Column(String(100), unique=True, nullable=False)
    name = Column(String(200), nullable=False)
    project_kee = Column(String(400))


class Issue(Base):
    __tablename__ = "issues"

    issue_id = Column(Integer, primary_key=True, autoincrement=True)
    kee = Column(String(50), unique=True, nullable=False)
    component_kee = Column(String(400), nullable=False)
    project_kee = Column(String(400), nullable=False)
    rule_key = Column(String(255), nullable=False)
    line = Column(Integer)
    message = Column(Text)
    status = Column(String(20), nullable=False, default="OPEN")
    resolution = Column(String(20))
    severity = Column(String(10))
    author_login = Column(String(255))
    assignee = Column(String(100))
    reporter = Column(String(100))
    action_plan_key = Column(String(100))
    technical_debt = Column(Integer)  # minutes
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime)
    closed_at = Column(DateTime)

    comments = relationship(
        "IssueComment",
        back_populates="issue",
        cascade="all, delete-orphan",
        order_by="IssueComment.created_at",
    )
    changes = relationship("IssueChange", back_populates="issue", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_issue_project", "project_kee"),
        Index("idx_issue_component", "component_kee"),
    )


class IssueComment(Base):
    __tablename__ = "issue_comments"

    comment_id = Column(Integer, primary_key=True, autoincrement=True)
    kee = Column(String(50), unique=True, nullable=False)
    issue_kee = Column(String(50), ForeignKey("issues.kee", ondelete="CASCADE"), nullable=False)
    user_login = Column(String(100))
    markdown_text = Column(Text)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime)

    issue = relationship("Issue", back_populates="comments")


class IssueChange(Base):
    __tablename__ = "issue_changes"

    change_id = Column(Integer, primary_key=True, autoincrement=True)
    kee = Column(String(40), unique=True, nullable=False)
    issue_kee = Column(String(50), ForeignKey("issues.kee", ondelete="CASCADE"), nullable=False)
    user_login = Column(String(100), nullable=True)
    change_data = Column(Text, nullable=False)  # JSON string: {field: {"old": .., "new": ..}}
    created_at = Column(BigInteger, nullable=False)  # epoch millis

    issue = relationship("Issue", back_populates="changes")

    __table_args__ = (
        Index("idx_issue_changes_issue", "issue_kee", "created_at"),
    )
