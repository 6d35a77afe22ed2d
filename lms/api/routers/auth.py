from fastapi import APIRouter, Depends, Form
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import BaseModel

from lms.auth import authenticate_user, create_access_token, create_user, get_user_by_id
from lms.api.dependencies import get_current_session
from lms.errors import AuthenticationMissing

router = APIRouter(prefix="/api/auth", tags=["auth"])


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


@router.post("/register", response_model=Token)
def register(name: str = Form(...), email: str = Form(...), password: str = Form(...)):
    user = create_user(email, password, name=name, role="student")
    return Token(access_token=create_access_token(user.id, user.role))


@router.post("/login", response_model=Token)
def login(form_data: OAuth2PasswordRequestForm = Depends()):
    user = authenticate_user(form_data.username, form_data.password)
    if not user:
        raise AuthenticationMissing("Incorrect email or password")
    return Token(access_token=create_access_token(user.id, user.role))


@router.get("/me")
def me(session: dict = Depends(get_current_session)):
    user = get_user_by_id(session["id"])
    if not user:
        raise AuthenticationMissing()
    return {"_id": user.id, "name": user.name, "email": user.email, "role": user.role}
