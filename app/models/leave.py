"""
Leave models: leave types, per-user leave policies (the balance ledger)
and leave requests
"""
from sqlalchemy import (
    Column,
    Integer,
    Date,
    DateTime,
    ForeignKey,
    String,
    Boolean,
    Enum as SQLEnum,
    UniqueConstraint,
    Index,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from app.db.base import Base


class LeaveStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class LeaveDecision(str, enum.Enum):
    APPROVED = "approved"
    REJECTED = "rejected"


class LeaveType(Base):
    __tablename__ = "leave_types"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    is_paid = Column(Boolean, nullable=False, default=False)
    description = Column(String(255), nullable=True)
    created_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    updated_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)


class LeavePolicy(Base):
    """
    Leave allotment for one (user, leave type) pair.
    Single source of truth for the remaining balance; decremented only when
    a leave is approved.
    """
    __tablename__ = "leave_policies"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    leave_type_id = Column(Integer, ForeignKey("leave_types.id"), nullable=False, index=True)
    policy_name = Column(String(150), nullable=True)
    total_days = Column(Integer, nullable=False, default=0)
    remaining_days = Column(Integer, nullable=False, default=0)
    created_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    updated_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    user = relationship("User", foreign_keys=[user_id])
    leave_type = relationship("LeaveType")

    __table_args__ = (
        UniqueConstraint("user_id", "leave_type_id", name="uq_leave_policies_user_type"),
        CheckConstraint("remaining_days >= 0", name="check_remaining_days_non_negative"),
        CheckConstraint("remaining_days <= total_days", name="check_remaining_le_total"),
    )


class Leave(Base):
    __tablename__ = "leaves"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    leave_type_id = Column(Integer, ForeignKey("leave_types.id"), nullable=False, index=True)
    from_date = Column(Date, nullable=False)
    to_date = Column(Date, nullable=False)
    total_days = Column(Integer, nullable=False)  # inclusive day span, fixed once approved
    reason = Column(String(255), nullable=True)
    status = Column(SQLEnum(LeaveStatus, values_callable=lambda e: [m.value for m in e]), nullable=False, default=LeaveStatus.PENDING)
    approved_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    updated_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    user = relationship("User", foreign_keys=[user_id])
    approver = relationship("User", foreign_keys=[approved_by_id])
    leave_type = relationship("LeaveType")

    __table_args__ = (
        Index("ix_leaves_user_status", "user_id", "status"),
        CheckConstraint("from_date <= to_date", name="check_from_date_le_to_date"),
    )
