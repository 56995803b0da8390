from typing import Optional
from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from auth import SessionContext, end_session, require_session, session_cookie, start_session
from database import get_db
from schemas import CurrentUser, LoginRequest, LoginResponse, SignupRequest, SignupResponse, SuccessResponse
from service import LinkService, get_link_service

router = APIRouter()

@router.post("/signup", response_model=SignupResponse)
async def signup(body: SignupRequest, response: Response, db: AsyncSession = Depends(get_db),
                 service: LinkService = Depends(get_link_service)):
    user, projection = await service.sign_up(body.email, body.password, body.name)
    await start_session(db, response, user)
    return SignupResponse(user=projection)

@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, response: Response, db: AsyncSession = Depends(get_db),
                service: LinkService = Depends(get_link_service)):
    user, projection = await service.log_in(body.email, body.password)
    await start_session(db, response, user)
    return LoginResponse(user=projection)

@router.post("/logout", response_model=SuccessResponse)
async def logout(response: Response, token: Optional[str] = Depends(session_cookie),
                 db: AsyncSession = Depends(get_db)):
    await end_session(db, response, token)
    return SuccessResponse()

@router.get("/me", response_model=CurrentUser)
async def me(session: SessionContext = Depends(require_session), service: LinkService = Depends(get_link_service)):
    return await service.get_current_user(session)
