"""
Scope description storage and the resolved shape handed to templates.
"""

from pydantic import BaseModel
from sqlalchemy import Column, DateTime, String, Text, UniqueConstraint, func

from idp_console.database import Base, generate_uuid, utcnow


class ScopeDescription(Base):
    """Localized display text for a scope, administered out of band."""

    __tablename__ = "scope_descriptions"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String, nullable=False)
    locale = Column(String, nullable=False)
    display_name = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow, server_default=func.now())
    updated_at = Column(DateTime, default=utcnow, server_default=func.now())

    __table_args__ = (UniqueConstraint("name", "locale", name="constraint_scope_name_locale"),)


class ResolvedScope(BaseModel):
    name: str
    display_name: str
    description: str
