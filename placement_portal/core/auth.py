"""
Authentication Utility - JWT, Password handling and role checks.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- has_role / is_staff predicates (the only place roles are compared)
- FastAPI dependencies for protected routes
"""

from datetime import datetime, timedelta
from typing import Iterable, Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from placement_portal.core.config import get_settings
from placement_portal.core.exceptions import AuthenticationError, AuthorizationError, NotFoundError
from placement_portal.services.mongo_service import UserStore, to_object_id

settings = get_settings()

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractors
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


# ============================================================
# ROLE PREDICATES
# ============================================================

def has_role(user: Optional[dict], roles: Iterable[str]) -> bool:
    """True when the identity's role is one of `roles`."""
    if not user:
        return False
    return user.get("role") in set(roles)


def is_staff(user: Optional[dict]) -> bool:
    """Staff = admin plus any configured moderator roles (coordinator, teacher)."""
    return has_role(user, set(settings.staff_roles) | {"admin"})


def identity_from_doc(doc: dict) -> dict:
    """Identity dict passed to services and route handlers."""
    return {
        "user_id": str(doc["_id"]),
        "email": doc.get("email"),
        "name": doc.get("name"),
        "role": doc.get("role", "student"),
    }


# ============================================================
# FASTAPI DEPENDENCIES
# ============================================================

def _resolve_user(credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[dict]:
    if credentials is None:
        return None

    payload = decode_token(credentials.credentials)
    if not payload or not payload.get("sub"):
        raise AuthenticationError("Invalid or expired token")

    try:
        oid = to_object_id(payload["sub"], "User")
    except NotFoundError:
        raise AuthenticationError("Invalid or expired token")

    user = UserStore().get_by_id(oid)
    if not user:
        raise AuthenticationError("Invalid or expired token")

    return identity_from_doc(user)


def get_current_user(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> dict:
    """
    FastAPI dependency - Get current authenticated user.

    Usage:
        @router.get("/protected")
        def route(user: dict = Depends(get_current_user)):
            return user
    """
    user = _resolve_user(credentials)
    if user is None:
        raise AuthenticationError("Not authorized, no token")
    return user


def get_optional_user(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> Optional[dict]:
    """Dependency - Current user if a token was sent, else None (anonymous allowed)."""
    return _resolve_user(credentials)


def get_current_staff(user: dict = Depends(get_current_user)) -> dict:
    """Dependency - Require a staff role."""
    if not is_staff(user):
        raise AuthorizationError("Staff access required")
    return user


def get_current_admin(user: dict = Depends(get_current_user)) -> dict:
    """Dependency - Require the admin role itself."""
    if not has_role(user, {"admin"}):
        raise AuthorizationError("Admin access required")
    return user
