from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Base for wire models: snake_case in Python, camelCase in JSON."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Enums
class UserRole(str, Enum):
    investor = "investor"
    contractor = "contractor"
    consultant = "consultant"
    developer = "developer"
    supplier = "supplier"


class IndicatorType(str, Enum):
    opportunity = "opportunity"
    trend = "trend"
    alert = "alert"


# Status values are an open vocabulary: each persona sees its own set.
STATUS_BY_ROLE: Dict[str, List[str]] = {
    UserRole.investor.value: ["Planning", "Under Construction", "Nearing Completion", "Completed / Operational"],
    UserRole.contractor.value: ["Tender Open", "Planning", "Under Construction", "In Progress", "On Hold"],
    UserRole.consultant.value: ["Planning", "Under Construction", "Completed", "On Hold"],
    UserRole.developer.value: ["Planning", "Under Construction", "Nearing Completion", "Completed"],
    UserRole.supplier.value: ["Tender Open", "Planning", "Under Construction", "In Progress"],
}

COMPLETED_STATUSES = {"Completed", "Completed / Operational"}


# Models
class ProjectCreate(CamelModel):
    name: str
    description: Optional[str] = None
    location: Optional[str] = None
    country: str
    city: str
    district: str
    sector: str
    sub_sector: Optional[str] = None
    project_type: str
    contract_type: Optional[str] = None
    status: str
    investment: float = Field(..., ge=0, description="Total investment in millions USD")
    expected_roi: Optional[float] = None
    current_roi: Optional[float] = None
    size: Optional[float] = None
    capacity: Optional[int] = None
    floors: Optional[int] = None
    built_up_area: Optional[float] = None
    completion_date: Optional[str] = None
    image_url: Optional[str] = None
    features: List[str] = Field(default_factory=list)
    is_luxury: bool = False
    is_waterfront: bool = False
    is_sustainable: bool = False


class Project(ProjectCreate):
    id: int
    created_at: datetime = Field(default_factory=utc_now)

    @property
    def relevant_roi(self) -> Optional[float]:
        """currentRoi for completed projects, expectedRoi otherwise (display rule only)."""
        if self.status in COMPLETED_STATUSES:
            return self.current_roi
        return self.expected_roi


class UserPublic(CamelModel):
    id: str
    email: str
    first_name: str
    last_name: str
    phone_number: Optional[str] = None
    selected_role: UserRole
    email_notifications: bool = True
    created_at: datetime
    updated_at: datetime


class User(UserPublic):
    password_hash: str

    def to_public(self) -> UserPublic:
        return UserPublic(**self.model_dump(exclude={"password_hash"}))


class Session(CamelModel):
    id: str
    user_id: str
    expires_at: datetime
    created_at: datetime

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return self.expires_at <= (now or utc_now())


class MarketIndicatorCreate(CamelModel):
    title: str
    description: str
    type: IndicatorType
    value: str  # +23%, -8%, etc.
    value_label: str  # demand vs supply, new projects Q1, etc.
    location: Optional[str] = None
    sector: Optional[str] = None
    is_active: bool = True


class MarketIndicator(MarketIndicatorCreate):
    id: int
    created_at: datetime = Field(default_factory=utc_now)


class UserPreferences(CamelModel):
    id: int
    session_id: str
    selected_role: Optional[UserRole] = None
    saved_searches: List[str] = Field(default_factory=list)
    favorite_projects: List[int] = Field(default_factory=list)
    created_at: datetime
