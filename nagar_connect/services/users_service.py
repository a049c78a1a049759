from __future__ import annotations

import logging
import re
from typing import Dict

from email_validator import EmailNotValidError, validate_email

from nagar_connect.core.enums import UserType
from nagar_connect.core.errors import Conflict, ValidationFailed
from nagar_connect.core.security import CurrentUser, hash_password, verify_password
from nagar_connect.models.user import CitizenProfile, FieldStaffProfile, NgoProfile, User
from nagar_connect.repositories.user_repository import ProfileRepository, UserRepository
from nagar_connect.schemas.user import RegisterRequest

logger = logging.getLogger(__name__)

PHONE_RE = re.compile(r"^\d{10}$")

# registration form role -> stored user type
ROLE_MAP = {
    "citizen": UserType.citizen.value,
    "worker": UserType.field_staff.value,
    "ngo": UserType.ngo.value,
}

PROFILE_MODELS = {
    UserType.citizen.value: CitizenProfile,
    UserType.field_staff.value: FieldStaffProfile,
    UserType.ngo.value: NgoProfile,
}


# -------------------------
# Helpers
# -------------------------
def _email_norm(email: str) -> str:
    return (email or "").lower().strip()


def validate_registration(body: RegisterRequest) -> None:
    required = (body.fname, body.lname, body.email, body.phn, body.password, body.confirmPassword, body.role)
    if not all((v or "").strip() for v in required):
        raise ValidationFailed("All fields are required")
    if body.password != body.confirmPassword:
        raise ValidationFailed("Passwords do not match")
    if len(body.password) < 8:
        raise ValidationFailed("Password must be at least 8 characters long")
    try:
        validate_email(body.email.strip(), check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValidationFailed("Invalid email format") from exc
    if not PHONE_RE.match(body.phn.strip()):
        raise ValidationFailed("Phone number must be 10 digits")


class UserService:
    def __init__(self, users: UserRepository, profiles: Dict[str, ProfileRepository]):
        self.users = users
        self.profiles = profiles

    async def register(self, body: RegisterRequest) -> dict:
        validate_registration(body)

        email = _email_norm(body.email)
        phone = body.phn.strip()

        if await self.users.get_by_email(email):
            raise Conflict("User with this email already exists")
        if await self.users.get_by_phone(phone):
            raise Conflict("User with this phone number already exists")

        user_type = ROLE_MAP.get(body.role.strip().lower(), UserType.citizen.value)
        user = User(
            full_name=f"{body.fname.strip()} {body.lname.strip()}",
            email=email,
            phone_number=phone,
            password_hash=hash_password(body.password),
            user_type=user_type,
        )
        doc = await self.users.insert(user.model_dump(mode="python", by_alias=True, exclude_none=True))

        profile_repo = self.profiles.get(user_type)
        if profile_repo is not None:
            profile = PROFILE_MODELS[user_type](user_id=doc["_id"])
            await profile_repo.create(profile.model_dump(mode="python", by_alias=True, exclude_none=True))

        logger.info("User registered: %s (%s)", email, user_type)
        return doc

    async def authenticate(self, email: str, password: str) -> dict:
        """
        Returns the raw user doc. Messages match what the login form expects.
        """
        doc = await self.users.get_by_email(email)
        if not doc:
            raise ValidationFailed("User does not exist")

        if not verify_password(password, doc.get("password_hash", "")):
            raise ValidationFailed("Invalid password")

        logger.info("Login: %s", doc.get("email"))
        return doc


def session_user(doc: dict) -> CurrentUser:
    email = doc.get("email") or ""
    return CurrentUser(
        id=str(doc["_id"]),
        email=email,
        name=doc.get("full_name") or email.split("@")[0],
        role=doc.get("user_type"),
    )
