from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from lms.auth import decode_access_token, get_user_by_id
from lms.errors import AuthenticationMissing, AuthorizationDenied, ValidationFailure

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_current_session(token: Optional[str] = Depends(oauth2_scheme)) -> dict:
    if not token:
        raise AuthenticationMissing()
    return decode_access_token(token)  # {"id", "role"}


def require_role(*roles: str):
    """Dependency admitting only users whose stored role is one of ``roles``."""
    def role_guard(session: dict = Depends(get_current_session)):
        user = get_user_by_id(session["id"])
        if not user or user.role not in roles:
            raise AuthorizationDenied()
        return user
    return role_guard


def parse_id(value: Optional[str], name: str = "id") -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationFailure(f"Invalid {name}")
