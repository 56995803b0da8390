from fastapi import APIRouter, Depends

from auth import require_admin
from schemas import AdminLinkListResponse, AdminUserListResponse, PlanUpdate, StatsResponse, SuccessResponse
from service import LinkService, get_link_service

router = APIRouter(dependencies=[Depends(require_admin)])

@router.get("/stats", response_model=StatsResponse)
async def get_stats(service: LinkService = Depends(get_link_service)):
    return StatsResponse(data=await service.get_stats())

@router.get("/users", response_model=AdminUserListResponse)
async def list_users(service: LinkService = Depends(get_link_service)):
    return AdminUserListResponse(data=await service.list_users())

@router.get("/urls", response_model=AdminLinkListResponse)
async def list_urls(service: LinkService = Depends(get_link_service)):
    return AdminLinkListResponse(data=await service.list_urls())

@router.put("/users/{user_id}/plan", response_model=SuccessResponse,
            description="Overwrite a user's plan with the given string, unvalidated. A body without `plan` is rejected with 400.")
async def set_user_plan(user_id: str, body: PlanUpdate, service: LinkService = Depends(get_link_service)):
    await service.set_user_plan(user_id, body.plan)
    return SuccessResponse()
