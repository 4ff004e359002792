from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.api.deps import get_owner_service
from app.core.config import settings
from app.schemas.owner import (
    OwnerCreate,
    OwnerEnvelope,
    OwnerListResponse,
    OwnerResponse,
    OwnershipSummary,
    OwnerUpdate,
)
from app.services.owner_service import OwnerService

router = APIRouter()


@router.get("", response_model=OwnerListResponse, status_code=status.HTTP_200_OK)
def list_owners(
    page: int = Query(1, description="1-indexed page number; pages outside the data are empty"),
    page_size: int = Query(
        settings.DEFAULT_PAGE_SIZE, ge=1,
        alias="pageSize", description="Number of owners per page",
    ),
    search: Optional[str] = Query(None, description="Case-insensitive match on name, email or role"),
    service: OwnerService = Depends(get_owner_service),
):
    """
    List owners in insertion order.

    The search filter is applied before pagination; ``total`` is the
    filtered count. Pages past the end return an empty ``data`` array.
    """
    result = service.list_owners(page=page, page_size=page_size, search=search)
    return OwnerListResponse(
        status="success",
        message="Owners fetched successfully",
        data=[OwnerResponse.model_validate(owner) for owner in result.data],
        page=result.page,
        page_size=result.page_size,
        total=result.total,
    )


@router.get("/summary", response_model=OwnershipSummary, status_code=status.HTTP_200_OK)
def get_ownership_summary(service: OwnerService = Depends(get_owner_service)):
    """Total ownership across all owners, with a warning above 100%."""
    return service.ownership_summary()


@router.get("/{owner_id}", response_model=OwnerEnvelope, status_code=status.HTTP_200_OK)
def get_owner(owner_id: str, service: OwnerService = Depends(get_owner_service)):
    owner = service.get_owner(owner_id)
    return OwnerEnvelope(
        status="success",
        message="Owner fetched successfully",
        data=OwnerResponse.model_validate(owner),
    )


@router.post("", response_model=OwnerEnvelope, status_code=status.HTTP_201_CREATED)
def create_owner(owner_data: OwnerCreate, service: OwnerService = Depends(get_owner_service)):
    """
    Create a new owner.

    The store assigns the id and both timestamps.
    """
    try:
        owner = service.create_owner(owner_data)
        return OwnerEnvelope(
            status="success",
            message="Owner created successfully",
            data=OwnerResponse.model_validate(owner),
        )
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create owner: {str(exc)}",
        )


@router.put("/{owner_id}", response_model=OwnerEnvelope, status_code=status.HTTP_200_OK)
@router.patch("/{owner_id}", response_model=OwnerEnvelope, status_code=status.HTTP_200_OK)
def update_owner(
    owner_id: str,
    owner_data: OwnerUpdate,
    service: OwnerService = Depends(get_owner_service),
):
    """
    Update an existing owner.

    Only the fields present in the body are changed.
    """
    try:
        owner = service.update_owner(owner_id, owner_data)
        return OwnerEnvelope(
            status="success",
            message="Owner updated successfully",
            data=OwnerResponse.model_validate(owner),
        )
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update owner: {str(exc)}",
        )


@router.delete("/{owner_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_owner(owner_id: str, service: OwnerService = Depends(get_owner_service)):
    service.delete_owner(owner_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
