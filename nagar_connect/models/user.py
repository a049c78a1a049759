from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field

from nagar_connect.core.enums import ApprovalStatus, StaffRole, UserType, VerificationStatus
from nagar_connect.models.common import (
    GeoPoint,
    NCBaseModel,
    NotificationPreferences,
    PostalAddress,
    PyObjectId,
)

DEFAULT_PROFILE_PICTURE = (
    "https://res.cloudinary.com/your-cloud-name/image/upload/v1/default_profile_pic.png"
)


class User(NCBaseModel):
    id: Optional[PyObjectId] = Field(None, alias="_id")
    full_name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password_hash: str
    user_type: UserType
    phone_number: Optional[str] = Field(None, pattern=r"^\d{10}$")
    profile_picture: str = DEFAULT_PROFILE_PICTURE
    address: Optional[PostalAddress] = None
    location: Optional[GeoPoint] = None
    preferences: NotificationPreferences = Field(default_factory=NotificationPreferences)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CitizenProfile(NCBaseModel):
    id: Optional[PyObjectId] = Field(None, alias="_id")
    user_id: PyObjectId
    address: Optional[PostalAddress] = None
    location: Optional[GeoPoint] = None
    preferences: NotificationPreferences = Field(default_factory=NotificationPreferences)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FieldStaffProfile(NCBaseModel):
    id: Optional[PyObjectId] = Field(None, alias="_id")
    user_id: PyObjectId
    employee_id: Optional[str] = None
    department: Optional[PyObjectId] = None
    role: StaffRole = StaffRole.team_member
    location: Optional[GeoPoint] = None
    approval_status: ApprovalStatus = ApprovalStatus.pending
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class NgoProfile(NCBaseModel):
    id: Optional[PyObjectId] = Field(None, alias="_id")
    user_id: PyObjectId
    ngo_name: Optional[str] = None
    registration_number: Optional[str] = None
    website: Optional[str] = None
    contact_person: Optional[str] = None
    contact_person_email: Optional[EmailStr] = None
    focus_areas: List[str] = Field(default_factory=list)
    verification_status: VerificationStatus = VerificationStatus.pending
    location: Optional[GeoPoint] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
