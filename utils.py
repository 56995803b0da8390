import math
import random
import string
from datetime import datetime
from typing import Optional
from sqlalchemy.future import select
from sqlalchemy.ext.asyncio import AsyncSession
from config import RESERVED_CODES, SHORT_CODE_LENGTH, SHORT_CODE_MAX_ATTEMPTS
from errors import ShortCodeExhausted
from models import Link

ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
SECONDS_PER_DAY = 24 * 60 * 60

def generate_short_code(length: int = SHORT_CODE_LENGTH) -> str:
    return ''.join(random.choices(ALPHABET, k=length))

async def get_unique_short_code(db: AsyncSession, reserved=RESERVED_CODES,
                                max_attempts: int = SHORT_CODE_MAX_ATTEMPTS) -> str:
    for _ in range(max_attempts):
        code = generate_short_code()
        if code in reserved:
            continue
        stmt = select(Link.id).filter(Link.short_code == code)
        result = await db.execute(stmt)
        if result.first() is None:
            return code
    raise ShortCodeExhausted()

def days_left(trial_ends: Optional[datetime], now: datetime) -> Optional[int]:
    if trial_ends is None:
        return None
    return math.ceil((trial_ends - now).total_seconds() / SECONDS_PER_DAY)

def trial_status(trial_ends: Optional[datetime], now: datetime) -> dict:
    left = days_left(trial_ends, now)
    if left is None:
        return {"active": False, "expired": True, "daysLeft": 0}
    return {"active": left > 0, "expired": left <= 0, "daysLeft": max(left, 0)}
