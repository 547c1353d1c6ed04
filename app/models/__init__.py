"""
Database models
"""
from app.models.role import Role, Permission, role_permission, role_user
from app.models.user import User
from app.models.leave import LeaveType, LeavePolicy, Leave, LeaveStatus, LeaveDecision
from app.models.holiday import Holiday
from app.models.attendance import Attendance
from app.models.audit_log import AuditLog
from app.models.token import RevokedToken

__all__ = [
    "Role",
    "Permission",
    "role_permission",
    "role_user",
    "User",
    "LeaveType",
    "LeavePolicy",
    "Leave",
    "LeaveStatus",
    "LeaveDecision",
    "Holiday",
    "Attendance",
    "AuditLog",
    "RevokedToken",
]
