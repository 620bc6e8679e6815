# aula/app/api/deps.py
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from aula.app.db.session import get_db
from aula.app.services.auth import AuthService
from aula.app.services.credentials import CredentialStore
from aula.app.services.roster import RosterStore

# auto_error=False: a missing or non-Bearer header comes through as None and
# is answered with our own 401 instead of FastAPI's 403
reusable_bearer = HTTPBearer(auto_error=False)


def get_auth_service(request: Request, db: AsyncSession = Depends(get_db)) -> AuthService:
    state = request.app.state
    return AuthService(
        credentials=CredentialStore(db, rounds=state.settings.BCRYPT_ROUNDS),
        tokens=state.token_service,
        identity=state.identity_verifier,
    )


def get_roster(db: AsyncSession = Depends(get_db)) -> RosterStore:
    return RosterStore(db)


def get_current_user(
        auth: AuthService = Depends(get_auth_service),
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(reusable_bearer),
) -> str:
    token = credentials.credentials if credentials else None
    return auth.verify_session(token)
