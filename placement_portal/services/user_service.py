"""
User Service - registration, login, profiles and the bootstrap admin.

Passwords are bcrypt-hashed before they reach MongoDB and are only
re-hashed when the password itself changes. Reads go through UserStore,
which strips the hash.
"""

import logging
import re
from typing import Optional, List, Tuple

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from placement_portal.core.auth import create_access_token, hash_password, verify_password
from placement_portal.core.config import get_settings
from placement_portal.core.exceptions import AuthenticationError, NotFoundError, ValidationError
from placement_portal.services.experience_service import ExperienceService
from placement_portal.services.mongo_service import UserStore, serialize_docs

logger = logging.getLogger(__name__)

SELF_SERVICE_ROLES = {"student", "alumni"}
PROFILE_FIELDS = ("name", "branch", "graduationYear", "currentCompany", "isAlumni", "profile")


def public_user(doc: dict) -> dict:
    """Fields safe to return for the account owner."""
    return {
        "id": str(doc["_id"]),
        "name": doc.get("name"),
        "username": doc.get("username"),
        "email": doc.get("email"),
        "role": doc.get("role"),
        "branch": doc.get("branch"),
        "graduationYear": doc.get("graduationYear"),
        "isAlumni": doc.get("isAlumni", False),
        "currentCompany": doc.get("currentCompany"),
        "profile": doc.get("profile") or {},
    }


class UserService:

    def __init__(self):
        self.users = UserStore()

    def _get_or_404(self, user_id: str) -> dict:
        doc = self.users.get_by_id(ObjectId(user_id))
        if not doc:
            raise NotFoundError("User not found")
        return doc

    @staticmethod
    def issue_token(doc: dict) -> str:
        return create_access_token(data={"sub": str(doc["_id"]), "role": doc.get("role")})

    # --------------------------------------------------------
    # Auth
    # --------------------------------------------------------

    def register(self, data: dict) -> Tuple[str, dict]:
        """
        Create an account and return (token, public user).
        Staff roles cannot be self-assigned.
        """
        email = data["email"].strip().lower()
        if self.users.get_by_email(email):
            raise ValidationError("User already exists with this email")

        username = (data.get("username") or "").strip().lower() or None
        if username and self.users.get_by_username(username):
            raise ValidationError("Username is already taken")

        is_alumni = bool(data.get("isAlumni"))
        role = data.get("role") or ("alumni" if is_alumni else "student")
        if role not in SELF_SERVICE_ROLES:
            raise ValidationError(f"Cannot register with role '{role}'")

        doc = {
            "name": data["name"].strip(),
            "email": email,
            "password": hash_password(data["password"]),
            "role": role,
            "branch": data.get("branch"),
            "graduationYear": data.get("graduationYear"),
            "currentCompany": None,
            "profile": {},
            "isAlumni": is_alumni,
        }
        if username:
            doc["username"] = username

        try:
            oid = self.users.insert(doc)
        except DuplicateKeyError:
            raise ValidationError("User already exists with this email")

        logger.info("User registered: %s (%s)", email, role)
        created = self.users.get_by_id(oid)
        return self.issue_token(created), public_user(created)

    def login(self, email: str, password: str) -> Tuple[str, dict]:
        doc = self.users.get_by_email(email, include_password=True)
        if not doc or not doc.get("password") or not verify_password(password, doc["password"]):
            raise AuthenticationError("Invalid credentials")
        return self.issue_token(doc), public_user(doc)

    # --------------------------------------------------------
    # Profiles
    # --------------------------------------------------------

    def get_profile(self, user_id: str) -> dict:
        return public_user(self._get_or_404(user_id))

    def update_profile(self, user_id: str, fields: dict) -> dict:
        fields = {k: v for k, v in fields.items() if k in PROFILE_FIELDS}
        if not fields:
            raise ValidationError("No fields to update")
        updated = self.users.update(ObjectId(user_id), fields)
        if updated is None:
            raise NotFoundError("User not found")
        return public_user(updated)

    def get_public_profile(self, username: str) -> dict:
        """Public card plus the user's approved experiences."""
        doc = self.users.get_by_username(username)
        if not doc:
            raise NotFoundError("User not found")
        user = public_user(doc)
        user.pop("email")
        return {
            "user": user,
            "experiences": ExperienceService().list_approved_for_author(doc["_id"]),
        }

    # --------------------------------------------------------
    # Admin listing
    # --------------------------------------------------------

    def list_users(
        self,
        branch: Optional[str] = None,
        graduation_year: Optional[int] = None,
        role: Optional[str] = None,
        search: Optional[str] = None
    ) -> List[dict]:
        query = {}
        if branch:
            query["branch"] = {"$regex": re.escape(branch), "$options": "i"}
        if graduation_year:
            query["graduationYear"] = graduation_year
        if role:
            query["role"] = role

        users = self.users.find(query)
        if search:
            needle = search.lower()
            users = [
                u for u in users
                if any(needle in (u.get(f) or "").lower() for f in ("name", "username", "email"))
            ]
        return serialize_docs(users)

    def user_filters(self) -> dict:
        return {
            "branches": sorted(b for b in self.users.distinct("branch") if b),
            "years": sorted((y for y in self.users.distinct("graduationYear") if y), reverse=True),
            "roles": sorted(r for r in self.users.distinct("role") if r),
        }

    # --------------------------------------------------------
    # Bootstrap admin
    # --------------------------------------------------------

    def ensure_bootstrap_admin(self) -> Optional[str]:
        """
        Create (or promote) the admin named by BOOTSTRAP_ADMIN_EMAIL.
        Does nothing unless both email and password are configured.
        """
        settings = get_settings()
        if not settings.bootstrap_admin_enabled:
            return None

        email = settings.bootstrap_admin_email.strip().lower()
        existing = self.users.get_by_email(email)
        if existing:
            if existing.get("role") != "admin":
                self.users.update(existing["_id"], {"role": "admin"})
                logger.warning("Bootstrap admin: promoted existing user %s to admin", email)
            return str(existing["_id"])

        oid = self.users.insert({
            "name": settings.bootstrap_admin_name,
            "email": email,
            "password": hash_password(settings.bootstrap_admin_password),
            "role": "admin",
            "profile": {},
            "isAlumni": False,
        })
        logger.warning("Bootstrap admin: created %s", email)
        return str(oid)


def get_user_service() -> UserService:
    """Get user service instance."""
    return UserService()
