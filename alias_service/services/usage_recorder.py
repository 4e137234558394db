from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from alias_service.errors import AccountingFailure
from alias_service.logging_config import get_logger
from alias_service.models.usage import UsageEvent

log = get_logger(__name__)


class UsageRecorder:
    """Appends one UsageEvent per successful redirect."""

    def __init__(self, db: Session):
        self.db = db

    def record(
        self,
        url_id: int,
        client_ip: Optional[str] = "",
        client_signature: Optional[str] = ""
    ) -> UsageEvent:
        """
        Write a usage event stamped with the current time.

        Raises:
            AccountingFailure: the event could not be persisted. The session
                is rolled back; nothing committed earlier is touched.
        """
        event = UsageEvent(
            url_id=url_id,
            accessed_at=datetime.now(timezone.utc),
            client_ip=client_ip or "",
            client_signature=client_signature or "",
        )

        try:
            self.db.add(event)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            log.error("usage_record_failed", url_id=url_id, error=str(e))
            raise AccountingFailure(f"Could not record usage for URL {url_id}.") from e

        return event
