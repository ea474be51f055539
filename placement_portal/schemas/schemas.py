"""
Pydantic Schemas - Request Validation

All API request schemas in one file for simplicity.
Python attributes are snake_case; JSON keys (and stored document fields)
are camelCase, e.g. `author_name` <-> "authorName".
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime
from enum import Enum


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        use_enum_values=True,
        validate_default=True,
    )

    def to_document(self) -> dict:
        """Fields the client actually sent, camelCased for storage."""
        return self.model_dump(by_alias=True, exclude_unset=True)


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    alumni = "alumni"
    admin = "admin"
    coordinator = "coordinator"
    teacher = "teacher"


class OfferStatus(str, Enum):
    selected = "Selected"
    not_selected = "Not Selected"
    pending = "Pending"


class ModerationStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class ReportReason(str, Enum):
    spam = "spam"
    inappropriate = "inappropriate"
    false_information = "false_information"
    duplicate = "duplicate"
    other = "other"


class ReportStatus(str, Enum):
    pending = "pending"
    reviewed = "reviewed"
    resolved = "resolved"
    dismissed = "dismissed"


class AnnouncementType(str, Enum):
    placement = "placement"
    general = "general"
    important = "important"


class AnnouncementPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    urgent = "urgent"


# ============================================================
# AUTH / USER SCHEMAS
# ============================================================

class RegisterRequest(CamelModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6)
    username: Optional[str] = Field(None, min_length=3, max_length=30)
    role: Optional[UserRole] = None
    branch: Optional[str] = None
    graduation_year: Optional[int] = Field(None, ge=1950, le=2100)
    is_alumni: bool = False


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


class UserProfile(CamelModel):
    bio: Optional[str] = Field(None, max_length=500)
    linkedin: Optional[str] = None
    github: Optional[str] = None


class ProfileUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    branch: Optional[str] = None
    graduation_year: Optional[int] = Field(None, ge=1950, le=2100)
    current_company: Optional[str] = None
    is_alumni: Optional[bool] = None
    profile: Optional[UserProfile] = None


# ============================================================
# EXPERIENCE SCHEMAS
# ============================================================

class Round(CamelModel):
    round_number: int = Field(..., ge=1)
    round_name: str = Field(..., min_length=1)
    questions: List[str] = []
    feedback: Optional[str] = None


class ExperienceCreate(CamelModel):
    company: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)
    branch: str = Field(..., min_length=1)
    year: int = Field(..., ge=1950, le=2100)
    rounds: List[Round] = Field(..., min_length=1)
    package: Optional[str] = None
    tips: Optional[str] = None
    interview_date: Optional[datetime] = None
    offer_status: OfferStatus = OfferStatus.pending
    author_name: Optional[str] = None
    is_anonymous: bool = False


class ExperienceUpdate(CamelModel):
    company: Optional[str] = Field(None, min_length=1)
    role: Optional[str] = Field(None, min_length=1)
    branch: Optional[str] = Field(None, min_length=1)
    year: Optional[int] = Field(None, ge=1950, le=2100)
    rounds: Optional[List[Round]] = Field(None, min_length=1)
    package: Optional[str] = None
    tips: Optional[str] = None
    interview_date: Optional[datetime] = None
    offer_status: Optional[OfferStatus] = None
    author_name: Optional[str] = None


class AdminExperienceUpdate(ExperienceUpdate):
    moderation_status: Optional[ModerationStatus] = None
    moderation_notes: Optional[str] = None


# ============================================================
# MODERATION / COMPANY SCHEMAS
# ============================================================

class ModerationRequest(CamelModel):
    notes: Optional[str] = None


class CompanyStandardCreate(CamelModel):
    standard_name: Optional[str] = None
    variations: Optional[List[str]] = None


class CompanyStandardUpdate(CamelModel):
    standard_name: Optional[str] = None
    variations: Optional[List[str]] = None


class StandardizeRequest(CamelModel):
    experience_id: Optional[str] = None
    standard_name: Optional[str] = None


# ============================================================
# COMMENT / REPORT SCHEMAS
# ============================================================

class CommentCreate(CamelModel):
    content: Optional[str] = None


class ReportCreate(CamelModel):
    reason: ReportReason
    description: Optional[str] = Field(None, max_length=500)


class ReportReview(CamelModel):
    status: Optional[ReportStatus] = None
    admin_notes: Optional[str] = None


# ============================================================
# ANNOUNCEMENT SCHEMAS
# ============================================================

class AnnouncementCreate(CamelModel):
    title: Optional[str] = Field(None, max_length=200)
    content: Optional[str] = Field(None, max_length=2000)
    type: AnnouncementType = AnnouncementType.general
    priority: AnnouncementPriority = AnnouncementPriority.medium
    expires_at: Optional[datetime] = None


class AnnouncementUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = Field(None, min_length=1, max_length=2000)
    type: Optional[AnnouncementType] = None
    priority: Optional[AnnouncementPriority] = None
    is_active: Optional[bool] = None
    expires_at: Optional[datetime] = None

