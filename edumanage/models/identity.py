from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin, generate_uuid, utcnow


class AuthIdentity(TimestampMixin, Base):
    """
    Login identity owned by the identity store.

    Kept apart from the tenant tables: provisioning talks to it through
    IdentityStore only, never through the request's tenant session.
    """
    __tablename__ = "auth_identities"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    email_confirmed = Column(Boolean, nullable=False, default=False)
    user_metadata = Column(JSON, nullable=False, default=dict)
    last_sign_in_at = Column(DateTime(timezone=True), nullable=True)

    profile = relationship(
        "Profile",
        back_populates="identity",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    def __repr__(self):
        return f"<AuthIdentity(id={self.id}, email={self.email})>"


class RevokedToken(Base):
    """Access token ids invalidated by sign-out; rows past expires_at can be purged"""
    __tablename__ = "revoked_tokens"

    jti = Column(String(64), primary_key=True)
    user_id = Column(String(36), ForeignKey("auth_identities.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    revoked_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self):
        return f"<RevokedToken(jti={self.jti}, user_id={self.user_id})>"
