from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from edumanage.schemas.enums import Gender, ParentRelationship, StudentStatus
from .base import Base, TenantModel, TimestampMixin, generate_uuid, utcnow, value_enum


class Student(TimestampMixin, TenantModel):
    __tablename__ = "students"

    class_id = Column(String(36), ForeignKey("classes.id", ondelete="SET NULL"), nullable=True, index=True)
    user_id = Column(String(36), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    date_of_birth = Column(Date, nullable=True)
    gender = Column(value_enum(Gender, "student_gender"), nullable=True)
    admission_number = Column(String(50), nullable=True)
    enrollment_date = Column(Date, nullable=False, default=lambda: utcnow().date())
    status = Column(value_enum(StudentStatus, "student_status"), nullable=False, default=StudentStatus.ACTIVE)
    address = Column(Text, nullable=True)
    emergency_contact_name = Column(String(255), nullable=True)
    emergency_contact_phone = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    class_ = relationship("Class", lazy="raise")
    parent_links = relationship(
        "StudentParent",
        back_populates="student",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise"
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"<Student(name={self.full_name}, status={self.status})>"


class StudentParent(TimestampMixin, Base):
    """Many-to-many link between students and parent profiles"""
    __tablename__ = "student_parents"
    __table_args__ = (
        UniqueConstraint("student_id", "parent_id", name="uq_student_parents_pair"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    student_id = Column(String(36), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    parent_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    relationship_type = Column(
        "relationship",
        value_enum(ParentRelationship, "parent_relationship"),
        nullable=False,
        default=ParentRelationship.PARENT
    )
    is_primary_contact = Column(Boolean, nullable=False, default=False)

    student = relationship("Student", back_populates="parent_links", lazy="raise")
    parent = relationship("Profile", lazy="raise")

    def __repr__(self):
        return f"<StudentParent(student_id={self.student_id}, parent_id={self.parent_id})>"
