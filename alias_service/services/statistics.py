from collections import defaultdict
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from alias_service.errors import NotFound, StorageFailure
from alias_service.logging_config import get_logger
from alias_service.models.url import URL
from alias_service.models.usage import UsageEvent
from alias_service.schemas.url import URLStatistics

log = get_logger(__name__)


class StatisticsAggregator:
    """
    Per-URL usage totals and per-client-signature breakdowns.

    Totals come from the usage event log, not from hit_count; hit_count is
    reported alongside so the two tallies can be compared.
    """

    def __init__(self, db: Session):
        self.db = db

    def compute_statistics(self, url_id: Optional[int] = None) -> List[URLStatistics]:
        """
        One entry per URL, including URLs with no usage and soft-deleted URLs.

        Args:
            url_id: restrict the result to a single URL

        Returns:
            Entries ordered by URL id
        """
        totals = (
            select(UsageEvent.url_id, func.count(UsageEvent.id).label("total"))
            .group_by(UsageEvent.url_id)
            .subquery()
        )
        url_query = (
            select(
                URL.id,
                URL.alias,
                URL.long_url,
                URL.hit_count,
                URL.deleted_at,
                func.coalesce(totals.c.total, 0).label("total"),
            )
            .outerjoin(totals, totals.c.url_id == URL.id)
            .order_by(URL.id)
        )
        signature_query = (
            select(
                UsageEvent.url_id,
                UsageEvent.client_signature,
                func.count(UsageEvent.id).label("occurrences"),
            )
            .group_by(UsageEvent.url_id, UsageEvent.client_signature)
        )
        if url_id is not None:
            url_query = url_query.where(URL.id == url_id)
            signature_query = signature_query.where(UsageEvent.url_id == url_id)

        try:
            url_rows = self.db.execute(url_query).all()
            signature_rows = self.db.execute(signature_query).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            log.error("storage_failure", operation="compute_statistics", error=str(e))
            raise StorageFailure("Storage error during compute_statistics.") from e

        signature_counts: Dict[int, Dict[str, int]] = defaultdict(dict)
        for row in signature_rows:
            signature_counts[row.url_id][row.client_signature] = row.occurrences

        return [
            URLStatistics(
                id=row.id,
                alias=row.alias,
                long_url=row.long_url,
                hit_count=row.hit_count,
                deleted_at=row.deleted_at,
                total_access_count=row.total,
                signature_counts=signature_counts.get(row.id, {}),
            )
            for row in url_rows
        ]

    def compute_url_statistics(self, url_id: int) -> URLStatistics:
        """Statistics for one URL; raises NotFound for unknown ids."""
        stats = self.compute_statistics(url_id=url_id)
        if not stats:
            raise NotFound(f"URL {url_id} not found.")
        return stats[0]
