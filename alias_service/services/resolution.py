"""
Redirect resolution.

Each request walks LOOKUP -> RATE_CHECK -> ACCOUNT -> RESPOND and ends in
one of three outcomes: redirect to the target, send the client to the
fallback, or reject as rate limited.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from alias_service.config import settings
from alias_service.errors import AccountingFailure
from alias_service.logging_config import get_logger
from alias_service.services.url_store import UrlStore
from alias_service.services.usage_recorder import UsageRecorder

log = get_logger(__name__)


class ResolutionOutcome(Enum):
    REDIRECT = "redirect"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"


class Resolution(BaseModel):
    """Result of resolving one alias."""
    model_config = ConfigDict(frozen=True)

    outcome: ResolutionOutcome
    location: Optional[str] = None  # target URL or fallback URL
    url_id: Optional[int] = None


class ResolutionEngine:
    """
    Orchestrates lookup, the rate-limit gate and accounting for redirects.

    The gate reads hit_count as seen at lookup time. Under concurrent load a
    few requests may slip past the threshold; admission is best effort.
    """

    def __init__(
        self,
        store: UrlStore,
        recorder: UsageRecorder,
        threshold: Optional[int] = None,
        fallback_url: Optional[str] = None
    ):
        self.store = store
        self.recorder = recorder
        self.threshold = settings.rate_limit_threshold if threshold is None else threshold
        self.fallback_url = settings.fallback_url if fallback_url is None else fallback_url

    def resolve(self, alias: str, client_ip: str = "", client_signature: str = "") -> Resolution:
        """
        Resolve an alias for a redirect request.

        Raises:
            StorageFailure: lookup or hit increment failed. Usage recording
                failures are logged and do not fail the redirect.
        """
        # LOOKUP
        url = self.store.find_active_by_alias(alias)
        if url is None:
            log.info("redirect_not_found", alias=alias)
            return self._not_found()

        url_id = url.id
        long_url = url.long_url

        # RATE_CHECK
        if url.hit_count >= self.threshold:
            log.warning(
                "redirect_rate_limited",
                alias=alias,
                url_id=url_id,
                hit_count=url.hit_count,
                threshold=self.threshold,
            )
            return Resolution(outcome=ResolutionOutcome.RATE_LIMITED, url_id=url_id)

        # ACCOUNT
        if not self.store.increment_hit_count(url_id):
            # Soft-deleted after the lookup
            log.info("redirect_not_found", alias=alias, url_id=url_id, reason="deleted")
            return self._not_found()

        try:
            self.recorder.record(url_id, client_ip, client_signature)
        except AccountingFailure as e:
            log.error("accounting_failed", alias=alias, url_id=url_id, error=e.message)

        # RESPOND
        return Resolution(outcome=ResolutionOutcome.REDIRECT, location=long_url, url_id=url_id)

    def _not_found(self) -> Resolution:
        return Resolution(outcome=ResolutionOutcome.NOT_FOUND, location=self.fallback_url)
