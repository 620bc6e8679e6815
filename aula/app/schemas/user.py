# aula/app/schemas/user.py
from pydantic import BaseModel
from typing import Optional


# Body for /register and /login. Both fields optional here so that a missing
# one is answered with our own 400 "missing fields" instead of a schema error.
class Credentials(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class GoogleLoginRequest(BaseModel):
    idToken: Optional[str] = None


# Returned by register / login / google-login
class AuthResponse(BaseModel):
    ok: int = 1
    user: str
    token: str


class VerifyResponse(BaseModel):
    ok: int = 1
    user: str


class TokenPayload(BaseModel):
    user: str
    iat: Optional[int] = None
    exp: int
