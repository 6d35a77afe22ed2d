from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlmodel import select

from lms import config
from lms.db import get_session
from lms.errors import AuthenticationMissing, Conflict
from lms.models import User

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def create_user(email: str, password: str, name: str | None = None, role: str = "student"):
    with get_session() as session:
        q = select(User).where(User.email == email)
        existing = session.exec(q).first()
        if existing:
            raise Conflict("User already exists")
        user = User(email=email, password_hash=hash_password(password), name=name, role=role)
        session.add(user)
        session.commit()
        session.refresh(user)
        return user


def authenticate_user(email: str, password: str):
    with get_session() as session:
        q = select(User).where(User.email == email)
        user = session.exec(q).first()
        if not user:
            return None
        if verify_password(password, user.password_hash):
            return user
        return None


def get_user_by_id(user_id: int):
    with get_session() as session:
        return session.get(User, user_id)


def create_access_token(user_id: int, role: str, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {"sub": str(user_id), "role": role, "exp": expire}
    return jwt.encode(to_encode, config.SECRET_KEY, algorithm=config.ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Return the session carried by a token: ``{"id": int, "role": str}``.

    Raises AuthenticationMissing for expired, forged or malformed tokens.
    """
    try:
        payload = jwt.decode(token, config.SECRET_KEY, algorithms=[config.ALGORITHM])
    except JWTError:
        raise AuthenticationMissing("Could not validate credentials")
    sub = payload.get("sub")
    if sub is None:
        raise AuthenticationMissing("Could not validate credentials")
    try:
        user_id = int(sub)
    except (TypeError, ValueError):
        raise AuthenticationMissing("Could not validate credentials")
    return {"id": user_id, "role": payload.get("role")}
