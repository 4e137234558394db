from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, computed_field

from alias_service.config import settings


class URLBase(BaseModel):
    long_url: HttpUrl = Field(..., description="The target URL to redirect to")


class URLCreate(URLBase):
    # Checked by validate_alias in the store so every rejection is a 400
    alias: Optional[str] = Field(None, description="Custom alias; generated when omitted")


class URLResponse(BaseModel):
    """Response schema that serializes the SQLAlchemy URL model

    - from_attributes=True enables ORM mode (reads from model attributes)
    - @computed_field creates derived fields
    """
    id: int
    long_url: str
    alias: str
    hit_count: int
    is_active: bool
    created_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    @computed_field
    @property
    def short_url(self) -> str:
        """Computed field - public redirect address for the alias"""
        return f"{settings.base_url}/{self.alias}"

    model_config = ConfigDict(from_attributes=True)


class DeleteResponse(BaseModel):
    url: URLResponse


class URLStatistics(BaseModel):
    """Usage totals for one URL, computed from the usage event log."""
    id: int
    alias: str
    long_url: str
    hit_count: int
    deleted_at: Optional[datetime] = None
    total_access_count: int
    signature_counts: Dict[str, int] = Field(default_factory=dict)


class StatisticsResponse(BaseModel):
    statistics: List[URLStatistics]
