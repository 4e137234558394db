import re
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from alias_service.config import settings
from alias_service.errors import (
    AliasConflict,
    AliasSpaceExhausted,
    NotFound,
    StorageFailure,
    ValidationError,
)
from alias_service.logging_config import get_logger
from alias_service.models.url import URL
from alias_service.services.alias_factory import AliasStrategyFactory
from alias_service.services.alias_strategies import AliasStrategy

log = get_logger(__name__)

# Path segments the HTTP layer already routes at the root
RESERVED_ALIASES = frozenset({"api", "docs", "redoc", "health"})
ALIAS_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
MAX_ALIAS_LENGTH = 64


def validate_alias(alias: str) -> str:
    """Return the stripped alias or raise ValidationError."""
    alias = (alias or "").strip()
    if not alias:
        raise ValidationError("Alias must not be empty.", field="alias")
    if len(alias) > MAX_ALIAS_LENGTH:
        raise ValidationError(
            f"Alias must be at most {MAX_ALIAS_LENGTH} characters.", field="alias"
        )
    if not ALIAS_PATTERN.match(alias):
        raise ValidationError(
            "Alias may only contain letters, digits, '_' or '-'.", field="alias"
        )
    if alias.lower() in RESERVED_ALIASES:
        raise ValidationError("This alias is reserved or not allowed.", field="alias")
    return alias


class UrlStore:
    """
    Durable alias -> URL mapping with soft delete and an atomic hit counter.

    Every write commits on its own so that callers (the resolution engine)
    can treat the hit increment and the usage write as separate outcomes.
    """

    def __init__(
        self,
        db: Session,
        alias_strategy: Optional[AliasStrategy] = None,
        max_retries: Optional[int] = None
    ):
        self.db = db
        self.alias_strategy = alias_strategy or AliasStrategyFactory.create_strategy()
        self.max_retries = settings.alias_max_retries if max_retries is None else max_retries

    @contextmanager
    def _storage_errors(self, operation: str):
        """Roll back and wrap unexpected database errors as StorageFailure."""
        try:
            yield
        except IntegrityError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            log.error("storage_failure", operation=operation, error=str(e))
            raise StorageFailure(f"Storage error during {operation}.") from e

    def create(self, long_url: str, alias: Optional[str] = None) -> URL:
        """
        Create a new active record.

        With an explicit alias, fails with AliasConflict when an active record
        holds it. Without one, generates candidates until the unique index
        accepts one or the retry budget is spent (AliasSpaceExhausted).
        """
        if not long_url or not str(long_url).strip():
            raise ValidationError("long_url must not be empty.", field="long_url")
        long_url = str(long_url).strip()

        if alias is not None:
            return self._create_with_alias(long_url, validate_alias(alias))
        return self._create_with_generated_alias(long_url)

    def _create_with_alias(self, long_url: str, alias: str) -> URL:
        if self.find_active_by_alias(alias) is not None:
            raise AliasConflict(f"Alias '{alias}' is not available.", field="alias")
        try:
            return self._insert(long_url, alias)
        except IntegrityError:
            # Another request claimed it between the check and the insert
            raise AliasConflict(f"Alias '{alias}' is not available.", field="alias")

    def _create_with_generated_alias(self, long_url: str) -> URL:
        for attempt in range(1, self.max_retries + 1):
            candidate = self.alias_strategy.generate()

            if candidate.lower() in RESERVED_ALIASES:
                log.info("alias_collision", alias=candidate, attempt=attempt, reason="reserved")
                continue

            try:
                return self._insert(long_url, candidate)
            except IntegrityError:
                log.info("alias_collision", alias=candidate, attempt=attempt, reason="taken")

        log.error("alias_space_exhausted", attempts=self.max_retries)
        raise AliasSpaceExhausted(
            f"Could not generate a unique alias after {self.max_retries} attempts."
        )

    def _insert(self, long_url: str, alias: str) -> URL:
        url = URL(long_url=long_url, alias=alias, hit_count=0, deleted_at=None)
        with self._storage_errors("create"):
            self.db.add(url)
            self.db.commit()
            self.db.refresh(url)

        log.info("alias_created", alias=alias, url_id=url.id)
        return url

    def find_active_by_alias(self, alias: str) -> Optional[URL]:
        """Soft-deleted records are invisible here."""
        with self._storage_errors("find_active_by_alias"):
            return self.db.query(URL).filter(
                URL.alias == alias,
                URL.is_active
            ).first()

    def find_by_id(self, url_id: int) -> Optional[URL]:
        """Administrative lookup, returns the record whatever its lifecycle state."""
        with self._storage_errors("find_by_id"):
            return self.db.query(URL).filter(URL.id == url_id).first()

    def increment_hit_count(self, url_id: int) -> bool:
        """
        Atomically add one to hit_count of an active record.

        The increment runs in SQL (hit_count = hit_count + 1) so concurrent
        redirects never lose updates. Returns False when no active record
        with that id exists.
        """
        with self._storage_errors("increment_hit_count"):
            result = self.db.execute(
                update(URL)
                .where(URL.id == url_id, URL.is_active)
                .values(hit_count=URL.hit_count + 1)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        return result.rowcount == 1

    def soft_delete(self, url_id: int) -> URL:
        """
        Mark a record deleted. Deleting an already deleted record is a no-op.

        Raises:
            NotFound: no record with this id was ever created
        """
        url = self.find_by_id(url_id)
        if url is None:
            raise NotFound(f"URL {url_id} not found.")

        if url.deleted_at is not None:
            return url

        # Conditional update keeps the first deletion timestamp under races
        with self._storage_errors("soft_delete"):
            result = self.db.execute(
                update(URL)
                .where(URL.id == url_id, URL.is_active)
                .values(deleted_at=datetime.now(timezone.utc))
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
            self.db.refresh(url)

        if result.rowcount:
            log.info("url_soft_deleted", url_id=url_id, alias=url.alias)
        return url
