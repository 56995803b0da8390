import jwt
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
from fastapi import Depends, Response
from fastapi.security import APIKeyCookie
from passlib.context import CryptContext
from sqlalchemy import delete
from sqlalchemy.future import select
from sqlalchemy.ext.asyncio import AsyncSession
from config import SESSION_SECRET, ALGORITHM, BCRYPT_ROUNDS, SESSION_COOKIE_NAME, SESSION_EXPIRE_HOURS
from database import get_db
from errors import Unauthenticated, Forbidden
from models import User, UserSession

logger = logging.getLogger(__name__)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)
session_cookie = APIKeyCookie(name=SESSION_COOKIE_NAME, auto_error=False)


@dataclass(frozen=True)
class SessionContext:
    user_id: int
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def get_password_hash(password: str):
    return pwd_context.hash(password)

def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)

def create_session_token(sid: str, user_id: int, expires_delta: timedelta = None):
    expire = datetime.utcnow() + (expires_delta if expires_delta else timedelta(hours=SESSION_EXPIRE_HOURS))
    to_encode = {"sid": sid, "sub": str(user_id), "exp": expire}
    return jwt.encode(to_encode, SESSION_SECRET, algorithm=ALGORITHM)

def decode_session_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, SESSION_SECRET, algorithms=[ALGORITHM])
    except jwt.PyJWTError as e:
        logger.warning("Session decode error: %s", e)
        return None

async def start_session(db: AsyncSession, response: Response, user: User) -> str:
    """Store a new server-side session for user and hand its token to the client."""
    sid = secrets.token_urlsafe(32)
    db.add(UserSession(sid=sid, user_id=user.id, created_at=datetime.utcnow()))
    await db.commit()
    token = create_session_token(sid, user.id)
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        max_age=SESSION_EXPIRE_HOURS * 60 * 60,
        httponly=True,
        samesite="lax",
    )
    return token

async def end_session(db: AsyncSession, response: Response, token: Optional[str]) -> None:
    payload = decode_session_token(token) if token else None
    if payload and payload.get("sid"):
        await db.execute(delete(UserSession).where(UserSession.sid == payload["sid"]))
        await db.commit()
    response.delete_cookie(SESSION_COOKIE_NAME)

async def load_session(db: AsyncSession, token: str) -> Optional[SessionContext]:
    payload = decode_session_token(token)
    if payload is None or payload.get("sid") is None:
        return None
    stmt = (
        select(UserSession, User)
        .join(User, User.id == UserSession.user_id)
        .filter(UserSession.sid == payload["sid"])
    )
    result = await db.execute(stmt)
    row = result.first()
    if row is None:
        return None
    _, user = row
    return SessionContext(user_id=user.id, email=user.email, role=user.role)

async def get_optional_session(token: Optional[str] = Depends(session_cookie),
                               db: AsyncSession = Depends(get_db)) -> Optional[SessionContext]:
    if not token:
        return None
    return await load_session(db, token)

async def require_session(session: Optional[SessionContext] = Depends(get_optional_session)) -> SessionContext:
    if session is None:
        raise Unauthenticated()
    return session

async def require_admin(session: Optional[SessionContext] = Depends(get_optional_session)) -> SessionContext:
    if session is None or not session.is_admin:
        raise Forbidden()
    return session
