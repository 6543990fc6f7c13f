from datetime import datetime
from typing import Any, Dict, Generic, List, Literal, Optional, TypeVar
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")

ProviderStatus = Literal["active", "inactive", "suspended"]


class CamelModel(BaseModel):
    """Base for payloads exchanged with clients: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True, alias_generator=to_camel)


class ApiResponse(BaseModel, Generic[DataT]):
    """Envelope shared by every successful response."""

    success: bool = True
    message: Optional[str] = None
    data: Optional[DataT] = None


class ServiceProviderCreate(CamelModel):
    """
    Body of POST /service-providers.

    The owner is never taken from the body; it is stamped from the
    authenticated requester. Verification is granted only through the
    admin verify route.
    """

    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    rating: float = Field(default=0, ge=0, le=5)
    status: ProviderStatus = "active"


class ServiceProviderUpdate(CamelModel):
    """Body of PUT /service-providers/{id}; only the supplied fields change."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    status: Optional[ProviderStatus] = None


# Status and verification bodies keep the raw JSON value so the service can
# answer 400 with its own message instead of a schema error.
class StatusUpdate(CamelModel):
    status: Any = None


class VerificationUpdate(CamelModel):
    is_verified: Any = None


class ServiceProvider(CamelModel):
    id: str
    user: str  # Owning user id
    name: str
    description: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    rating: float
    status: ProviderStatus
    is_verified: bool
    created_at: datetime
    updated_at: datetime


class ServiceProviderStatus(CamelModel):
    id: str
    name: str
    status: ProviderStatus
    updated_at: datetime


class ServiceProviderVerification(CamelModel):
    id: str
    name: str
    is_verified: bool
    updated_at: datetime


class PageLink(BaseModel):
    page: int
    limit: int


class Pagination(CamelModel):
    total: int
    pages: int
    current_page: int
    limit: int
    next: Optional[PageLink] = None
    prev: Optional[PageLink] = None


class ServiceProviderPage(CamelModel):
    # Rows are plain dicts because `select` may project any subset of fields.
    service_providers: List[Dict[str, Any]]
    pagination: Pagination
