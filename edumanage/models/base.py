# base.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum, ForeignKey, String
from sqlalchemy.orm import declarative_base, declared_attr

Base = declarative_base()


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def value_enum(enum_cls, name: str) -> Enum:
    """Persist a str Enum by its value rather than its member name"""
    return Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True
    )


class TimestampMixin:
    # Python-side default keeps microsecond ordering on every backend
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class TenantModel(Base):
    """
    A base mixin for multi-tenant architecture.
    Every tenant-scoped row carries the owning school's id.
    """
    __abstract__ = True

    id = Column(String(36), primary_key=True, default=generate_uuid)

    @declared_attr
    def school_id(cls):
        return Column(
            String(36),
            ForeignKey("schools.id", ondelete="CASCADE"),
            nullable=False,
            index=True
        )
