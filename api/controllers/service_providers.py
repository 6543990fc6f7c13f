from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from repositories.service_provider import ServiceProviderRepository
from security import Requester, get_current_user
from services.service_provider import ServiceProviderService
from schemas import (
    ApiResponse,
    ServiceProvider as ServiceProviderSchema,
    ServiceProviderCreate,
    ServiceProviderPage,
    ServiceProviderStatus,
    ServiceProviderUpdate,
    ServiceProviderVerification,
    StatusUpdate,
    VerificationUpdate,
)

router = APIRouter(prefix="/service-providers", tags=["Service Providers"])

def get_service_provider_repository(session: AsyncSession = Depends(get_db)) -> ServiceProviderRepository:
    return ServiceProviderRepository(session)

def get_service_provider_service(
    repository: ServiceProviderRepository = Depends(get_service_provider_repository),
) -> ServiceProviderService:
    return ServiceProviderService(repository)

# Omit unset envelope keys (`message`, `data`, `next`, `prev`) from responses.
ENVELOPE_OPTIONS = {"response_model_exclude_none": True}

@router.get("", response_model=ApiResponse[ServiceProviderPage], **ENVELOPE_OPTIONS)
async def read_service_providers(
    request: Request,
    service: ServiceProviderService = Depends(get_service_provider_service),
):
    """
    List service providers.

    Any query key other than `select`, `sort`, `page` and `limit` filters the
    results; comparisons use brackets, e.g. `rating[gte]=4`.
    """
    page = await service.list_providers(request.query_params.multi_items())
    return {"success": True, "data": page}

@router.get("/{provider_id}", response_model=ApiResponse[ServiceProviderSchema], **ENVELOPE_OPTIONS)
async def read_service_provider(
    provider_id: str,
    service: ServiceProviderService = Depends(get_service_provider_service),
):
    return {"success": True, "data": await service.get_provider(provider_id)}

@router.post(
    "",
    response_model=ApiResponse[ServiceProviderSchema],
    status_code=status.HTTP_201_CREATED,
    **ENVELOPE_OPTIONS,
)
async def create_service_provider(
    payload: ServiceProviderCreate,
    current_user: Requester = Depends(get_current_user),
    service: ServiceProviderService = Depends(get_service_provider_service),
):
    provider = await service.create_provider(payload, current_user)
    return {"success": True, "message": "Service provider created successfully", "data": provider}

@router.put("/{provider_id}", response_model=ApiResponse[ServiceProviderSchema], **ENVELOPE_OPTIONS)
async def update_service_provider(
    provider_id: str,
    payload: ServiceProviderUpdate,
    current_user: Requester = Depends(get_current_user),
    service: ServiceProviderService = Depends(get_service_provider_service),
):
    provider = await service.update_provider(provider_id, payload, current_user)
    return {"success": True, "message": "Service provider updated successfully", "data": provider}

@router.delete("/{provider_id}", response_model=ApiResponse[None], **ENVELOPE_OPTIONS)
async def delete_service_provider(
    provider_id: str,
    current_user: Requester = Depends(get_current_user),
    service: ServiceProviderService = Depends(get_service_provider_service),
):
    await service.delete_provider(provider_id, current_user)
    return {"success": True, "message": "Service provider deleted successfully"}

@router.patch("/{provider_id}/status", response_model=ApiResponse[ServiceProviderStatus], **ENVELOPE_OPTIONS)
async def update_service_provider_status(
    provider_id: str,
    payload: Optional[StatusUpdate] = None,
    current_user: Requester = Depends(get_current_user),
    service: ServiceProviderService = Depends(get_service_provider_service),
):
    provider = await service.set_status(provider_id, payload.status if payload else None, current_user)
    return {"success": True, "message": "Service provider status updated successfully", "data": provider}

@router.patch(
    "/{provider_id}/verify",
    response_model=ApiResponse[ServiceProviderVerification],
    **ENVELOPE_OPTIONS,
)
async def update_service_provider_verification(
    provider_id: str,
    payload: Optional[VerificationUpdate] = None,
    current_user: Requester = Depends(get_current_user),
    service: ServiceProviderService = Depends(get_service_provider_service),
):
    provider = await service.set_verification(
        provider_id, payload.is_verified if payload else None, current_user
    )
    return {
        "success": True,
        "message": "Service provider verification status updated successfully",
        "data": provider,
    }
