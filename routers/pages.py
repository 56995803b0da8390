from pathlib import Path
from typing import Optional
from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse, RedirectResponse

from auth import SessionContext, get_optional_session

PUBLIC_DIR = Path(__file__).resolve().parent.parent / "public"
HTML = "text/html; charset=utf-8"

router = APIRouter(include_in_schema=False)

def page(name: str) -> FileResponse:
    return FileResponse(PUBLIC_DIR / name, media_type=HTML)

@router.get("/")
async def home(session: Optional[SessionContext] = Depends(get_optional_session)):
    return page("dashboard.html" if session else "index.html")

@router.get("/login")
async def login_page():
    return page("login.html")

@router.get("/signup")
async def signup_page():
    return page("signup.html")

@router.get("/dashboard")
async def dashboard_page(session: Optional[SessionContext] = Depends(get_optional_session)):
    if not session:
        return RedirectResponse(url="/login", status_code=302)
    return page("dashboard.html")

@router.get("/admin")
async def admin_page(session: Optional[SessionContext] = Depends(get_optional_session)):
    if not session or not session.is_admin:
        return RedirectResponse(url="/login", status_code=302)
    return page("admin.html")
