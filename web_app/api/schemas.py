"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class LinkCreateRequest(BaseModel):
    """Admin request to create a link."""

    title: str = Field("", description="Display label", max_length=500)
    url: str = Field("", description="Target URL", max_length=2048)
    slug: Optional[str] = Field(None, description="Optional explicit short code", max_length=50)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"title": "Spring campaign", "url": "https://example.com/spring", "slug": "spring"},
                {"title": "Docs", "url": "https://example.com/docs/very/long/path"},
            ]
        }
    }


class LinkResponse(BaseModel):
    """A stored link."""

    id: int
    title: str
    target_url: str
    short_code: str
    short_url: str
    created_at: datetime
    clicks: int


class LinkListResponse(BaseModel):
    """Links in the requested order."""

    count: int
    order_by: str
    direction: str
    links: List[LinkResponse]


class DeleteResponse(BaseModel):
    """Result of a delete; deleting a missing id is not an error."""

    id: int
    deleted: bool


class ShortenRequest(BaseModel):
    """Programmatic creation request."""

    url: Optional[str] = Field(None, description="The URL to shorten", max_length=2048)
    title: Optional[str] = Field(None, description="Optional title (defaults to 'API Link')", max_length=500)
    alias: Optional[str] = Field(None, description="Optional custom short code", max_length=50)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"url": "https://example.com/very/long/path/to/resource"},
                {"url": "https://github.com/user/repo", "title": "Repo", "alias": "myrepo"},
            ]
        }
    }


class ShortenResponse(BaseModel):
    """Programmatic creation result."""

    short_url: str = Field(..., description="The complete short URL")
    qr_code_url: str = Field(..., description="QR code image URL for the short URL")
    short_code: str = Field(..., description="The short code")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "short_url": "https://sho.rt/abc123",
                    "qr_code_url": "https://quickchart.io/qr?text=https%3A%2F%2Fsho.rt%2Fabc123&size=150",
                    "short_code": "abc123",
                }
            ]
        }
    }


class ErrorResponse(BaseModel):
    """Structured error."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable message")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    database: str = Field(..., description="Database status")
    cache: str = Field(..., description="Cache status")
    timestamp: datetime = Field(..., description="Check timestamp")


class StatisticsResponse(BaseModel):
    """Statistics response."""

    total_links: int
    total_clicks: int
    database: str
    cache_enabled: bool


class DomainStatusResponse(BaseModel):
    """Latest DNS check of the short domain."""

    enabled: bool
    domain: Optional[str] = None
    state: str = "unknown"
    addresses: List[str] = []
    expected_ip: Optional[str] = None
    checked_at: Optional[datetime] = None
    error: Optional[str] = None
