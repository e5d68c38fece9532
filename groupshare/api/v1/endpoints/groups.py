"""Group endpoints."""
from fastapi import APIRouter, Depends, Request

from groupshare.api.deps import get_registry, valid_group_code
from groupshare.core.rate_limit import limiter, RATE_LIMITS
from groupshare.schemas import ErrorResponse, GroupLookupResponse, GroupResponse
from groupshare.services import GroupRegistry

router = APIRouter()


@router.post(
    "",
    response_model=GroupResponse,
    status_code=201,
    responses={503: {"model": ErrorResponse}},
)
@limiter.limit(RATE_LIMITS["create_group"])
async def create_group_endpoint(
    request: Request,
    registry: GroupRegistry = Depends(get_registry),
):
    """
    Create a new group and return its 6-digit join code.

    Example:
        Request:
            POST /api/v1/groups

        Response (201):
            {
                "code": "482913",
                "created_at": "2025-01-12T08:30:00Z",
                "expires_at": null
            }

        Response (503):
            {
                "success": false,
                "error": {"code": "CodeGenerationExhausted", "message": "..."}
            }
    """
    return registry.create_group()


@router.get("/{code}", response_model=GroupLookupResponse)
@limiter.limit(RATE_LIMITS["read"])
async def get_group_endpoint(
    request: Request,
    code: str = Depends(valid_group_code),
    registry: GroupRegistry = Depends(get_registry),
):
    """
    Check whether a join code belongs to a group.

    Always 200 for a well-formed code; ``exists`` tells the client whether
    to offer joining.
    """
    group = registry.get_group(code)
    return GroupLookupResponse(
        exists=group is not None,
        group=GroupResponse.model_validate(group) if group is not None else None,
    )
