from sqlalchemy import Boolean, Column, String, Text, UniqueConstraint

from .base import TenantModel, TimestampMixin

DEFAULT_SUBJECT_COLOR = "#3B82F6"


class Subject(TimestampMixin, TenantModel):
    __tablename__ = "subjects"
    __table_args__ = (
        UniqueConstraint("school_id", "code", name="uq_subjects_school_code"),
    )

    name = Column(String(255), nullable=False)
    code = Column(String(50), nullable=False)
    description = Column(Text, nullable=True)
    color = Column(String(20), nullable=False, default=DEFAULT_SUBJECT_COLOR)
    is_active = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<Subject(name={self.name}, code={self.code})>"
