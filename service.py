"""
Link service: accounts, links, click tracking and administrative reporting.

Every operation works against the AsyncSession it was constructed with;
authorization has already been settled by the caller and arrives here as a
SessionContext.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from fastapi import Depends
from sqlalchemy import func, distinct
from sqlalchemy.future import select
from sqlalchemy.ext.asyncio import AsyncSession

from auth import SessionContext, get_password_hash, verify_password
from config import (
    FREE_PLAN_LINK_LIMIT, PAID_PLAN_PRICE, PAID_PLANS, RESERVED_CODES, TRIAL_DAYS, get_base_url,
)
from database import get_db
from errors import DuplicateEmail, InvalidCredentials, InvalidInput, NotFound, QuotaExceeded, TrialExpired
from models import Click, Link, User
from schemas import (
    AdminLinkOut, AdminStats, AdminUserOut, CurrentUser, HealthOut, LinkOut, SessionUser, SignupUser, TrialStatus,
)
from utils import get_unique_short_code, trial_status

logger = logging.getLogger(__name__)


def parse_id(raw) -> Optional[int]:
    """Path ids that are not integers never match a record."""
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


class LinkService:
    def __init__(self, db: AsyncSession, reserved_codes=RESERVED_CODES):
        self.db = db
        self.reserved_codes = reserved_codes

    async def _get_user(self, user_id) -> Optional[User]:
        stmt = select(User).filter(User.id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _get_user_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).filter(User.email == email)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _count(self, stmt) -> int:
        result = await self.db.execute(stmt)
        return result.scalar_one()

    def _session_user(self, user: User, now: datetime) -> dict:
        return dict(
            id=user.id,
            email=user.email,
            name=user.name,
            role=user.role,
            plan=user.plan,
            trial=TrialStatus(**trial_status(user.trial_ends, now)),
        )

    # Authentication

    async def ensure_admin(self, email: str, password: str) -> User:
        stmt = select(User).filter(User.role == "admin")
        result = await self.db.execute(stmt)
        admin = result.scalars().first()
        if admin:
            return admin
        admin = User(
            email=email,
            hashed_password=get_password_hash(password),
            name="Admin",
            role="admin",
            plan="unlimited",
            trial_ends=None,
            created_at=datetime.utcnow(),
        )
        self.db.add(admin)
        await self.db.commit()
        await self.db.refresh(admin)
        logger.info("Admin user created: %s", admin.email)
        return admin

    async def sign_up(self, email: Optional[str], password: Optional[str], name: Optional[str]):
        """Register a free-plan user with a fresh trial. Returns the stored user and its public projection."""
        if not email or not password:
            raise InvalidInput("Email and password required")
        if await self._get_user_by_email(email):
            raise DuplicateEmail()
        now = datetime.utcnow()
        user = User(
            email=email,
            hashed_password=get_password_hash(password),
            name=name,
            role="user",
            plan="free",
            trial_ends=now + timedelta(days=TRIAL_DAYS),
            created_at=now,
            last_login=now,
        )
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        logger.info("User registered: %s", user.email)
        return user, SignupUser(id=user.id, email=user.email, name=user.name, plan=user.plan, trial_days=TRIAL_DAYS)

    async def log_in(self, email: Optional[str], password: Optional[str]):
        if not email or not password:
            raise InvalidInput("Email and password required")
        user = await self._get_user_by_email(email)
        if not user or not verify_password(password, user.hashed_password):
            logger.warning("Rejected login for %s", email)
            raise InvalidCredentials()
        now = datetime.utcnow()
        user.last_login = now
        await self.db.commit()
        logger.info("User logged in: %s", user.email)
        return user, SessionUser(**self._session_user(user, now))

    async def get_current_user(self, session: SessionContext) -> CurrentUser:
        user = await self._get_user(session.user_id)
        if not user:
            raise NotFound("User not found")
        return CurrentUser(created_at=user.created_at, **self._session_user(user, datetime.utcnow()))

    # Links

    async def shorten(self, session: SessionContext, long_url: Optional[str]) -> LinkOut:
        if not long_url:
            raise InvalidInput("URL required")
        user = await self._get_user(session.user_id)
        if not user:
            raise NotFound("User not found")
        owned = await self._count(select(func.count(Link.id)).filter(Link.owner_id == user.id))
        if user.plan == "free" and owned >= FREE_PLAN_LINK_LIMIT:
            if user.trial_ends is None or user.trial_ends <= datetime.utcnow():
                raise TrialExpired()
            raise QuotaExceeded()

        short_code = await get_unique_short_code(self.db, self.reserved_codes)
        link = Link(
            owner_id=user.id,
            long_url=long_url,
            short_code=short_code,
            short_url=f"{get_base_url()}/{short_code}",
            created_at=datetime.utcnow(),
        )
        self.db.add(link)
        await self.db.commit()
        await self.db.refresh(link)
        logger.info("Link created by %s: %s", user.email, link.short_code)
        return self._link_out(link)

    def _link_out(self, link: Link, clicks: int = 0, unique_visitors: int = 0) -> LinkOut:
        return LinkOut(
            id=link.id,
            user_id=link.owner_id,
            long_url=link.long_url,
            short_code=link.short_code,
            short_url=link.short_url,
            created_at=link.created_at,
            clicks=clicks,
            unique_visitors=unique_visitors,
        )

    async def list_links(self, session: SessionContext) -> List[LinkOut]:
        stmt = (
            select(Link, func.count(Click.id), func.count(distinct(Click.ip)))
            .outerjoin(Click, Click.link_id == Link.id)
            .filter(Link.owner_id == session.user_id)
            .group_by(Link.id)
            .order_by(Link.id)
        )
        result = await self.db.execute(stmt)
        return [self._link_out(link, clicks, visitors) for link, clicks, visitors in result.all()]

    async def delete_link(self, session: SessionContext, link_id) -> None:
        stmt = select(Link).filter(Link.id == parse_id(link_id), Link.owner_id == session.user_id)
        result = await self.db.execute(stmt)
        link = result.scalar_one_or_none()
        if not link:
            raise NotFound("URL not found")
        await self.db.delete(link)
        await self.db.commit()
        logger.info("Link deleted by %s: %s", session.email, link.short_code)

    async def resolve(self, short_code: str, ip: Optional[str] = None,
                      user_agent: Optional[str] = None, referrer: Optional[str] = None) -> str:
        """Record a click for short_code and return the URL to redirect to."""
        if short_code in self.reserved_codes:
            raise NotFound("Page not found")
        stmt = select(Link).filter(Link.short_code == short_code).order_by(Link.id)
        result = await self.db.execute(stmt)
        link = result.scalars().first()
        if not link:
            raise NotFound("URL not found")
        self.db.add(Click(
            link_id=link.id,
            clicked_at=datetime.utcnow(),
            ip=ip,
            user_agent=user_agent,
            referrer=referrer,
        ))
        await self.db.commit()
        logger.info("Redirected %s -> %s", short_code, link.long_url)
        return link.long_url

    # Administration

    async def get_stats(self) -> AdminStats:
        total_users = await self._count(select(func.count(User.id)).filter(User.role != "admin"))
        paid_users = await self._count(select(func.count(User.id)).filter(User.plan.in_(PAID_PLANS)))
        total_urls = await self._count(select(func.count(Link.id)))
        total_clicks = await self._count(select(func.count(Click.id)))

        today = datetime.now().date()
        result = await self.db.execute(select(User.created_at))
        new_users_today = sum(1 for (created_at,) in result.all() if local_date(created_at) == today)

        return AdminStats(
            total_users=total_users,
            paid_users=paid_users,
            total_urls=total_urls,
            total_clicks=total_clicks,
            new_users_today=new_users_today,
            mrr=paid_users * PAID_PLAN_PRICE,
        )

    async def list_users(self) -> List[AdminUserOut]:
        url_counts = (
            select(Link.owner_id, func.count(Link.id).label("total"))
            .group_by(Link.owner_id)
            .subquery()
        )
        click_counts = (
            select(Link.owner_id, func.count(Click.id).label("total"))
            .join(Click, Click.link_id == Link.id)
            .group_by(Link.owner_id)
            .subquery()
        )
        stmt = (
            select(User, url_counts.c.total, click_counts.c.total)
            .outerjoin(url_counts, url_counts.c.owner_id == User.id)
            .outerjoin(click_counts, click_counts.c.owner_id == User.id)
            .filter(User.role != "admin")
            .order_by(User.id)
        )
        result = await self.db.execute(stmt)
        return [
            AdminUserOut(
                id=user.id,
                email=user.email,
                name=user.name,
                role=user.role,
                plan=user.plan,
                trial_ends=user.trial_ends,
                created_at=user.created_at,
                last_login=user.last_login,
                total_urls=total_urls or 0,
                total_clicks=total_clicks or 0,
            )
            for user, total_urls, total_clicks in result.all()
        ]

    async def list_urls(self) -> List[AdminLinkOut]:
        stmt = (
            select(Link, User.email, func.count(Click.id))
            .outerjoin(User, User.id == Link.owner_id)
            .outerjoin(Click, Click.link_id == Link.id)
            .group_by(Link.id, User.email)
            .order_by(Link.id)
        )
        result = await self.db.execute(stmt)
        return [
            AdminLinkOut(
                id=link.id,
                long_url=link.long_url,
                short_code=link.short_code,
                short_url=link.short_url,
                created_at=link.created_at,
                user_email=email or "Unknown",
                clicks=clicks,
            )
            for link, email, clicks in result.all()
        ]

    async def set_user_plan(self, user_id, plan: Optional[str]) -> None:
        user = await self._get_user(parse_id(user_id))
        if not user:
            raise NotFound("User not found")
        if plan is None:
            raise InvalidInput("Plan required")
        user.plan = plan
        await self.db.commit()
        logger.info("Plan for %s set to %s", user.email, plan)

    async def health(self) -> HealthOut:
        return HealthOut(
            status="healthy",
            timestamp=datetime.utcnow(),
            users=await self._count(select(func.count(User.id))),
            urls=await self._count(select(func.count(Link.id))),
            clicks=await self._count(select(func.count(Click.id))),
        )


def local_date(utc_timestamp: datetime):
    """Calendar date of a naive UTC timestamp in the server's local timezone."""
    return utc_timestamp.replace(tzinfo=timezone.utc).astimezone().date()


async def get_link_service(db: AsyncSession = Depends(get_db)) -> LinkService:
    return LinkService(db)
