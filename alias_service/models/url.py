from datetime import datetime
from typing import Union

from pydantic import BaseModel, ConfigDict
from sqlalchemy import Column, DateTime, Index, Integer, String, text
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from alias_service.database.connection import Base


class Active(BaseModel):
    """Lifecycle state of a record that lookups can see."""
    model_config = ConfigDict(frozen=True)


class Deleted(BaseModel):
    """Lifecycle state of a soft-deleted record."""
    model_config = ConfigDict(frozen=True)

    at: datetime


UrlLifecycle = Union[Active, Deleted]


class URL(Base):
    """
    Alias -> long URL mapping.

    hit_count is the running tally used by the redirect rate-limit gate.
    The usage event log (url_usage) is kept separately for statistics.

    Aliases are unique among rows where deleted_at IS NULL, enforced by a
    partial unique index so a soft-deleted alias can be claimed again.
    """
    __tablename__ = "urls"
    __table_args__ = (
        Index(
            "uq_urls_alias_active",
            "alias",
            unique=True,
            sqlite_where=text("deleted_at IS NULL"),
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    long_url = Column(String, nullable=False)
    alias = Column(String(64), nullable=False, index=True)
    hit_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    usages = relationship(
        "UsageEvent",
        back_populates="url",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @hybrid_property
    def is_active(self) -> bool:
        return self.deleted_at is None

    @is_active.inplace.expression
    @classmethod
    def _is_active_expression(cls):
        return cls.deleted_at.is_(None)

    @property
    def lifecycle(self) -> UrlLifecycle:
        """Tagged view of deleted_at: Active() or Deleted(at=...)."""
        if self.deleted_at is None:
            return Active()
        return Deleted(at=self.deleted_at)

    def __repr__(self) -> str:
        return f"<URL id={self.id} alias={self.alias!r} hits={self.hit_count}>"
