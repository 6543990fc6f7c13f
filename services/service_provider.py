import logging
from typing import Any, Iterable

from config import settings
from errors import ErrorResponse
from models import PROVIDER_STATUSES, ServiceProvider, utcnow
from repositories.service_provider import ServiceProviderRepository
from schemas import (
    ServiceProvider as ServiceProviderSchema,
    ServiceProviderCreate,
    ServiceProviderStatus,
    ServiceProviderUpdate,
    ServiceProviderVerification,
)
from security import Requester, allow, is_admin
from services.query import build_list_query, build_pagination

logger = logging.getLogger(__name__)


class ServiceProviderService:
    def __init__(self, repository: ServiceProviderRepository):
        self.repository = repository

    async def _get_or_404(self, provider_id: str) -> ServiceProvider:
        provider = await self.repository.get_by_id(provider_id)
        if provider is None:
            raise ErrorResponse(f"Service provider not found with id of {provider_id}", 404)
        return provider

    def _ensure_can_modify(self, provider: ServiceProvider, requester: Requester, action: str) -> None:
        if not allow(provider.user, requester.id, requester.role):
            logger.warning("User %s denied %s on service provider %s", requester.id, action, provider.id)
            raise ErrorResponse(
                f"User {requester.id} is not authorized to {action} this service provider", 403
            )

    async def list_providers(self, query_items: Iterable[tuple[str, str]]) -> dict:
        query = build_list_query(
            query_items,
            default_limit=settings.default_page_limit,
            max_limit=settings.max_page_limit,
        )
        # Count and page fetch are separate round-trips; total can drift under concurrent writes.
        total = await self.repository.count(query.filters)
        rows = []
        # Pages past the last match are empty; their offset may not fit a database integer.
        if query.start_index < total:
            rows = await self.repository.find(
                query.filters,
                fields=query.fields,
                sort=query.sort,
                skip=query.start_index,
                limit=query.limit,
            )
        return {
            "service_providers": rows,
            "pagination": build_pagination(query, total),
        }

    async def get_provider(self, provider_id: str) -> ServiceProviderSchema:
        provider = await self._get_or_404(provider_id)
        return ServiceProviderSchema.model_validate(provider)

    async def get_provider_id_for_user(self, user_id: str) -> str:
        provider_id = await self.repository.get_id_by_user(user_id)
        if provider_id is None:
            raise ErrorResponse("Service provider not found for this user.", 404)
        return provider_id

    async def create_provider(self, payload: ServiceProviderCreate, requester: Requester) -> ServiceProviderSchema:
        values = payload.model_dump()
        values["user"] = requester.id
        provider = await self.repository.create(values)
        logger.info("User %s created service provider %s", requester.id, provider.id)
        return ServiceProviderSchema.model_validate(provider)

    async def update_provider(
        self, provider_id: str, payload: ServiceProviderUpdate, requester: Requester
    ) -> ServiceProviderSchema:
        provider = await self._get_or_404(provider_id)
        self._ensure_can_modify(provider, requester, "update")

        values = payload.model_dump(exclude_unset=True, exclude_none=True)
        provider = await self.repository.update(provider, values)
        logger.info("User %s updated service provider %s: %s", requester.id, provider.id, sorted(values))
        return ServiceProviderSchema.model_validate(provider)

    async def delete_provider(self, provider_id: str, requester: Requester) -> None:
        provider = await self._get_or_404(provider_id)
        self._ensure_can_modify(provider, requester, "delete")

        await self.repository.delete(provider)
        logger.info("User %s deleted service provider %s", requester.id, provider_id)

    async def set_status(self, provider_id: str, status: Any, requester: Requester) -> ServiceProviderStatus:
        if status not in PROVIDER_STATUSES:
            raise ErrorResponse("Invalid status value", 400)

        provider = await self._get_or_404(provider_id)
        self._ensure_can_modify(provider, requester, "update")

        provider = await self.repository.update(provider, {"status": status, "updated_at": utcnow()})
        logger.info("User %s set service provider %s status to %s", requester.id, provider.id, status)
        return ServiceProviderStatus.model_validate(provider)

    async def set_verification(
        self, provider_id: str, is_verified: Any, requester: Requester
    ) -> ServiceProviderVerification:
        # Only a real JSON boolean is accepted; "true" or 1 are rejected.
        if not isinstance(is_verified, bool):
            raise ErrorResponse("Invalid verification status", 400)

        provider = await self._get_or_404(provider_id)

        if not is_admin(requester.role):
            logger.warning("User %s denied verify on service provider %s", requester.id, provider.id)
            raise ErrorResponse(f"User {requester.id} is not authorized to verify service providers", 403)

        provider = await self.repository.update(provider, {"is_verified": is_verified, "updated_at": utcnow()})
        logger.info("User %s set service provider %s verified=%s", requester.id, provider.id, is_verified)
        return ServiceProviderVerification.model_validate(provider)
