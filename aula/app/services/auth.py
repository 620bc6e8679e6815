# aula/app/services/auth.py
"""
Login, registration and session checks.

Composes the credential store, the token service and the Google verifier.
Clients only ever see "invalid credentials" for a failed password login;
the log keeps whether the user was unknown or the password was wrong.
"""
import logging
import secrets
from dataclasses import dataclass

from aula.app.core.exceptions import (
    AuthenticationError,
    CredentialNotFound,
    InvalidCredentials,
    MissingFields,
    MissingIdToken,
    PasswordMismatch,
    Unauthorized,
    UserAlreadyExists,
)
from aula.app.security.google import GoogleIdentityVerifier
from aula.app.security.jwt import TokenService
from aula.app.services.credentials import CredentialStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    username: str
    token: str


class AuthService:
    def __init__(
        self,
        credentials: CredentialStore,
        tokens: TokenService,
        identity: GoogleIdentityVerifier,
    ):
        self.credentials = credentials
        self.tokens = tokens
        self.identity = identity

    async def register(self, username, password) -> AuthResult:
        if not username or not password:
            raise MissingFields()

        await self.credentials.create(username, password)
        logger.info("Registered user %s", username)
        return AuthResult(username=username, token=self.tokens.issue(username))

    async def login(self, username, password) -> AuthResult:
        if not username or not password:
            raise MissingFields()

        try:
            await self.credentials.verify(username, password)
        except CredentialNotFound:
            logger.info("Login failed for %s: unknown user", username)
            raise InvalidCredentials()
        except PasswordMismatch:
            logger.info("Login failed for %s: wrong password", username)
            raise InvalidCredentials()

        logger.info("User %s logged in", username)
        return AuthResult(username=username, token=self.tokens.issue(username))

    async def login_with_identity_assertion(self, assertion) -> AuthResult:
        if not assertion:
            raise MissingIdToken()

        identity = await self.identity.verify(assertion)
        email = identity.email

        if not await self.credentials.exists(email):
            # Random password nobody knows: the account is only reachable
            # through Google sign-in from now on
            try:
                await self.credentials.create(email, secrets.token_urlsafe(32))
                logger.info("Provisioned Google account %s (%s)", email, identity.display_name)
            except UserAlreadyExists:
                # A concurrent first login created it
                pass

        return AuthResult(username=email, token=self.tokens.issue(email))

    def verify_session(self, token) -> str:
        if not token:
            raise Unauthorized("missing authorization")
        try:
            return self.tokens.verify(token)
        except AuthenticationError as exc:
            logger.debug("Session rejected: %s", exc.message)
            raise Unauthorized() from exc
