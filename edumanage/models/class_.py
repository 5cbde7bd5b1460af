from sqlalchemy import Boolean, Column, String

from .base import TenantModel, TimestampMixin


class Class(TimestampMixin, TenantModel):
    __tablename__ = "classes"

    name = Column(String(255), nullable=False)
    grade_level = Column(String(50), nullable=False)
    section = Column(String(50), nullable=True)
    academic_year = Column(String(20), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<Class(name={self.name}, grade_level={self.grade_level})>"
