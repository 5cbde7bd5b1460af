from sqlalchemy import Column, Date, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from edumanage.schemas.enums import AttendanceStatus
from .base import TenantModel, TimestampMixin, utcnow, value_enum


class AttendanceRecord(TimestampMixin, TenantModel):
    """One row per student per day; re-marking a day replaces the row"""
    __tablename__ = "attendance"
    __table_args__ = (
        UniqueConstraint("student_id", "date", name="uq_attendance_student_date"),
    )

    student_id = Column(String(36), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    class_id = Column(String(36), ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    status = Column(value_enum(AttendanceStatus, "attendance_status"), nullable=False)
    notes = Column(Text, nullable=True)
    marked_by = Column(String(36), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    student = relationship("Student", lazy="raise")

    def __repr__(self):
        return f"<AttendanceRecord(student_id={self.student_id}, date={self.date}, status={self.status})>"
