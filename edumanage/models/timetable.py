from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, String, Time
from sqlalchemy.orm import relationship

from .base import TenantModel, TimestampMixin


class TimetableEntry(TimestampMixin, TenantModel):
    """
    One weekly slot. Overlapping slots for the same teacher or room are allowed.
    """
    __tablename__ = "timetable_entries"
    __table_args__ = (
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_timetable_day_of_week"),
    )

    class_id = Column(String(36), ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)
    subject_id = Column(String(36), ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False)
    teacher_id = Column(String(36), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    day_of_week = Column(Integer, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    room = Column(String(100), nullable=True)

    class_ = relationship("Class", lazy="raise")
    subject = relationship("Subject", lazy="raise")
    teacher = relationship("Profile", lazy="raise")

    def __repr__(self):
        return f"<TimetableEntry(class_id={self.class_id}, day={self.day_of_week}, start={self.start_time})>"
