from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, validator


class CamelModel(BaseModel):
    class Config:
        populate_by_name = True


def number_to_str(v):
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return v


# Request bodies. Fields are optional so that missing values surface as InvalidInput.

class SignupRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None

    @validator("email", "password", "name", pre=True)
    def numbers_as_text(cls, v):
        return number_to_str(v)

class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

    @validator("email", "password", pre=True)
    def numbers_as_text(cls, v):
        return number_to_str(v)

class ShortenRequest(CamelModel):
    long_url: Optional[str] = Field(default=None, alias="longUrl")

    @validator("long_url", pre=True)
    def numbers_as_text(cls, v):
        return number_to_str(v)

class PlanUpdate(BaseModel):
    plan: Optional[str] = Field(default=None, description="Stored verbatim; a missing plan is rejected with 400.")

    @validator("plan", pre=True)
    def numbers_as_text(cls, v):
        return number_to_str(v)


# Users

class TrialStatus(CamelModel):
    active: bool
    expired: bool
    days_left: int = Field(alias="daysLeft")

class SignupUser(CamelModel):
    id: int
    email: str
    name: Optional[str] = None
    plan: str
    trial_days: int = Field(alias="trialDays")

class SessionUser(CamelModel):
    id: int
    email: str
    name: Optional[str] = None
    role: str
    plan: str
    trial: TrialStatus

class CurrentUser(SessionUser):
    created_at: datetime = Field(alias="createdAt")

class SignupResponse(BaseModel):
    success: bool = True
    user: SignupUser

class LoginResponse(BaseModel):
    success: bool = True
    user: SessionUser


# Links

class LinkOut(CamelModel):
    id: int
    user_id: int = Field(alias="userId")
    long_url: str = Field(alias="longUrl")
    short_code: str = Field(alias="shortCode")
    short_url: str = Field(alias="shortUrl")
    created_at: datetime = Field(alias="createdAt")
    clicks: int = 0
    unique_visitors: int = Field(default=0, alias="uniqueVisitors")

class LinkResponse(BaseModel):
    success: bool = True
    data: LinkOut

class LinkListResponse(BaseModel):
    success: bool = True
    data: List[LinkOut]


# Administration

class AdminStats(CamelModel):
    total_users: int = Field(alias="totalUsers")
    paid_users: int = Field(alias="paidUsers")
    total_urls: int = Field(alias="totalUrls")
    total_clicks: int = Field(alias="totalClicks")
    new_users_today: int = Field(alias="newUsersToday")
    mrr: int

class AdminUserOut(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    role: str
    plan: str
    trial_ends: Optional[datetime] = None
    created_at: datetime
    last_login: Optional[datetime] = None
    total_urls: int
    total_clicks: int

class AdminLinkOut(CamelModel):
    id: int
    long_url: str
    short_code: str
    short_url: str = Field(alias="shortUrl")
    created_at: datetime
    user_email: str
    clicks: int

class StatsResponse(BaseModel):
    success: bool = True
    data: AdminStats

class AdminUserListResponse(BaseModel):
    success: bool = True
    data: List[AdminUserOut]

class AdminLinkListResponse(BaseModel):
    success: bool = True
    data: List[AdminLinkOut]


class SuccessResponse(BaseModel):
    success: bool = True

class HealthOut(BaseModel):
    status: str
    timestamp: datetime
    users: int
    urls: int
    clicks: int
