"""Team management routes."""

from typing import Annotated

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, status

from bizops.application.usecase.team import CreateMemberUseCase
from bizops.application.usecase.team.create_member import CreateMemberRequest
from bizops.domain.value import AuthenticatedIdentity, Role
from bizops.interface.api.dependencies import require_roles
from bizops.interface.api.schemas import ApiResponse, IdentityBody

router = APIRouter(prefix="/team", tags=["team"], route_class=DishkaRoute)


@router.post(
    "/members",
    response_model=ApiResponse[IdentityBody],
    status_code=status.HTTP_201_CREATED,
)
async def create_member(
    body: CreateMemberRequest,
    admin: Annotated[AuthenticatedIdentity, Depends(require_roles(Role.ADMIN))],
    create_member_use_case: FromDishka[CreateMemberUseCase],
) -> ApiResponse[IdentityBody]:
    """Add a user or member to the team (admins only).

    Example:
        POST /api/v1/team/members
        {"name": "Bob", "email": "bob@example.com", "password": "S3cure!pass",
         "role": "member", "status": "active", "permissions": ["Dashboard", "Chat"]}
    """
    _ = admin  # Authorization only
    result = await create_member_use_case.execute(body)
    return ApiResponse(
        message=result.message, data=IdentityBody.from_identity(result.identity)
    )
