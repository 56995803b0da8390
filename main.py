import logging
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import ADMIN_EMAIL, ADMIN_PASSWORD, LOG_LEVEL, PORT
from database import async_session_maker, dispose_models, init_models
from routers import admin, links, pages, users
from schemas import HealthOut
from service import LinkService, get_link_service

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(
    title="QuickLinks",
    version="1.0.0",
    description="URL shortening service with click analytics",
)

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info("Rejected request body for %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})

@app.get("/api/health", response_model=HealthOut, tags=["health"])
async def health(service: LinkService = Depends(get_link_service)):
    return await service.health()

app.include_router(users.router, prefix="/api/auth", tags=["auth"])
app.include_router(links.router, prefix="/api", tags=["links"])
app.include_router(admin.router, prefix="/api/admin", tags=["admin"])
app.include_router(pages.router)
app.include_router(links.redirect_router, tags=["redirect"])

@app.on_event("startup")
async def startup():
    await init_models()
    async with async_session_maker() as db:
        await LinkService(db).ensure_admin(ADMIN_EMAIL, ADMIN_PASSWORD)
    logger.info("QuickLinks ready on port %s, admin: %s", PORT, ADMIN_EMAIL)

@app.on_event("shutdown")
async def shutdown():
    await dispose_models()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=PORT)
