"""코딩 룰과 기술 부채 특성(characteristic) 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class DebtCharacteristic(Base):
    __tablename__ = "debt_characteristic"

    characteristic_id = Column(Integer, primary_key=True, autoincrement=True)
    kee = Column(String(100), unique=True, nullable=False)
    name = Column(String(100), nullable=False)
    parent_id = Column(Integer, ForeignKey("debt_characteristic.characteristic_id"), nullable=True)

    parent = relationship("DebtCharacteristic", remote_side=[characteristic_id])


class Rule(Base):
    __tablename__ = "rules"

    rule_id = Column(Integer, primary_key=True, autoincrement=True)
    rule_key = Column(String(255), unique=True, nullable=False)  # "<repository>:<key>"
    name = Column(String(200), nullable=False)
    language = Column(String(20))
    severity = Column(String(10), default="MAJOR")
    status = Column(String(20), default="READY")
    # 부채 요구사항이 연결된 하위 특성. 비활성화된 경우 None
    characteristic_id = Column(Integer, ForeignKey("debt_characteristic.characteristic_id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    characteristic = relationship("DebtCharacteristic")

    __table_args__ = (
        Index("idx_rule_language", "language"),
    )
