# aula/app/api/v1/endpoints/auth.py
from fastapi import APIRouter, Depends

from aula.app.api import deps
from aula.app.schemas.user import AuthResponse, Credentials, GoogleLoginRequest, VerifyResponse
from aula.app.services.auth import AuthService

router = APIRouter()


@router.get("/ping")
async def ping():
    return {"ok": 1}


@router.post("/register", response_model=AuthResponse)
async def register(body: Credentials, auth: AuthService = Depends(deps.get_auth_service)):
    result = await auth.register(body.username, body.password)
    return AuthResponse(user=result.username, token=result.token)


@router.post("/login", response_model=AuthResponse)
async def login(body: Credentials, auth: AuthService = Depends(deps.get_auth_service)):
    result = await auth.login(body.username, body.password)
    return AuthResponse(user=result.username, token=result.token)


@router.get("/verify-token", response_model=VerifyResponse)
async def verify_token(current_user: str = Depends(deps.get_current_user)):
    return VerifyResponse(user=current_user)


@router.post("/google-login", response_model=AuthResponse)
async def google_login(body: GoogleLoginRequest, auth: AuthService = Depends(deps.get_auth_service)):
    result = await auth.login_with_identity_assertion(body.idToken)
    return AuthResponse(user=result.username, token=result.token)
