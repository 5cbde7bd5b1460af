from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship

from edumanage.schemas.enums import AppRole
from .base import Base, TimestampMixin, generate_uuid, utcnow, value_enum


class Profile(TimestampMixin, Base):
    """One profile per identity; school_id is null while the user belongs to no school"""
    __tablename__ = "profiles"

    id = Column(String(36), ForeignKey("auth_identities.id", ondelete="CASCADE"), primary_key=True)
    email = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=False, default="")
    avatar_url = Column(String(512), nullable=True)
    school_id = Column(String(36), ForeignKey("schools.id", ondelete="SET NULL"), nullable=True, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    identity = relationship("AuthIdentity", back_populates="profile")
    roles = relationship(
        "UserRole",
        back_populates="profile",
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    def __repr__(self):
        return f"<Profile(id={self.id}, email={self.email}, school_id={self.school_id})>"


class UserRole(TimestampMixin, Base):
    """A (user, role, school) grant. school_id is null only for platform-wide roles"""
    __tablename__ = "user_roles"
    __table_args__ = (
        UniqueConstraint("user_id", "role", "school_id", name="uq_user_roles_user_role_school"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(value_enum(AppRole, "app_role"), nullable=False)
    school_id = Column(String(36), ForeignKey("schools.id", ondelete="CASCADE"), nullable=True, index=True)

    profile = relationship("Profile", back_populates="roles")

    def __repr__(self):
        return f"<UserRole(user_id={self.user_id}, role={self.role}, school_id={self.school_id})>"
