from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, RedirectResponse

from auth import SessionContext, require_session
from errors import NotFound
from schemas import LinkListResponse, LinkResponse, ShortenRequest, SuccessResponse
from service import LinkService, get_link_service

router = APIRouter()
redirect_router = APIRouter()

@router.post("/shorten", response_model=LinkResponse)
async def create_link(body: ShortenRequest, session: SessionContext = Depends(require_session),
                      service: LinkService = Depends(get_link_service)):
    return LinkResponse(data=await service.shorten(session, body.long_url))

@router.get("/urls", response_model=LinkListResponse)
async def list_links(session: SessionContext = Depends(require_session), service: LinkService = Depends(get_link_service)):
    return LinkListResponse(data=await service.list_links(session))

@router.delete("/urls/{link_id}", response_model=SuccessResponse)
async def delete_link(link_id: str, session: SessionContext = Depends(require_session),
                      service: LinkService = Depends(get_link_service)):
    await service.delete_link(session, link_id)
    return SuccessResponse()

@redirect_router.get("/{short_code}", name="redirect_link")
async def redirect_link(short_code: str, request: Request, service: LinkService = Depends(get_link_service)):
    try:
        long_url = await service.resolve(
            short_code,
            ip=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
            referrer=request.headers.get("referer") or request.headers.get("referrer"),
        )
    except NotFound as e:
        return PlainTextResponse(e.detail, status_code=e.status_code)
    return RedirectResponse(url=long_url, status_code=301)
