"""
FastAPI dependencies for dependency injection.

Each request gets its own session; the services built on top of it are
cheap per-request objects. The alias strategy is a process-wide singleton.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from alias_service.database.connection import get_db
from alias_service.services.alias_factory import AliasStrategyFactory
from alias_service.services.alias_strategies import AliasStrategy
from alias_service.services.resolution import ResolutionEngine
from alias_service.services.statistics import StatisticsAggregator
from alias_service.services.url_store import UrlStore
from alias_service.services.usage_recorder import UsageRecorder


def get_alias_strategy() -> AliasStrategy:
    """
    Get alias strategy instance.

    The factory caches one instance per strategy type and reads the
    default type from settings.
    """
    return AliasStrategyFactory.create_strategy()


def get_url_store(
    db: Session = Depends(get_db),
    alias_strategy: AliasStrategy = Depends(get_alias_strategy)
) -> UrlStore:
    return UrlStore(db=db, alias_strategy=alias_strategy)


def get_usage_recorder(db: Session = Depends(get_db)) -> UsageRecorder:
    return UsageRecorder(db=db)


def get_resolution_engine(
    store: UrlStore = Depends(get_url_store),
    recorder: UsageRecorder = Depends(get_usage_recorder)
) -> ResolutionEngine:
    """Threshold and fallback URL come from settings."""
    return ResolutionEngine(store=store, recorder=recorder)


def get_statistics_aggregator(db: Session = Depends(get_db)) -> StatisticsAggregator:
    return StatisticsAggregator(db=db)
