from sqlalchemy import Column, String

from .base import Base, TimestampMixin, generate_uuid


class School(TimestampMixin, Base):
    """
    The tenant. Every school-scoped row hangs off a school id.
    """
    __tablename__ = "schools"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False)

    def __repr__(self):
        return f"<School(name={self.name}, slug={self.slug})>"
