from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from alias_service.database.connection import Base


class UsageEvent(Base):
    """
    One row per successful redirect.

    Rows are append-only; they disappear only when the owning URL row is
    physically removed (ON DELETE CASCADE).
    """
    __tablename__ = "url_usage"

    id = Column(Integer, primary_key=True, autoincrement=True)
    url_id = Column(
        Integer,
        ForeignKey("urls.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    accessed_at = Column(DateTime(timezone=True), nullable=False)
    client_ip = Column(String, nullable=False, default="")
    client_signature = Column(String, nullable=False, default="")

    url = relationship("URL", back_populates="usages")
