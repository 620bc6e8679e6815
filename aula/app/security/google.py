# aula/app/security/google.py
"""
Google sign-in: turn a Google ID token into a verified email.

The signature, audience and expiry checks are done by google-auth against
Google's published certificates, bound to this deployment's OAuth client id.
Fetching the certificates is blocking I/O, so verification runs in the
threadpool.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from google.auth import exceptions as google_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token
from starlette.concurrency import run_in_threadpool

from aula.app.core.exceptions import (
    IdentityNotConfigured,
    InvalidAssertion,
    MissingEmailClaim,
)

logger = logging.getLogger(__name__)

# (token, request, audience) -> claims
VerifyCallable = Callable[[str, Any, str], Mapping[str, Any]]


@dataclass(frozen=True)
class FederatedIdentity:
    email: str
    display_name: str


class GoogleIdentityVerifier:
    def __init__(self, client_id: Optional[str], verify_token: Optional[VerifyCallable] = None):
        self.client_id = client_id
        self._verify_token = verify_token or id_token.verify_oauth2_token
        self._request = google_requests.Request()

    def _verify_sync(self, assertion: str) -> Mapping[str, Any]:
        return self._verify_token(assertion, self._request, self.client_id)

    async def verify(self, assertion: str) -> FederatedIdentity:
        if not self.client_id:
            raise IdentityNotConfigured()

        try:
            claims = await run_in_threadpool(self._verify_sync, assertion)
        except (ValueError, google_exceptions.GoogleAuthError) as exc:
            # Wrong audience, expired or bad signature all land here
            logger.info("Google ID token rejected: %s", exc)
            raise InvalidAssertion() from exc

        # google-auth checks signature, audience and expiry but not this claim
        if claims.get("email_verified") in (False, "false"):
            logger.info("Google ID token rejected: email not verified")
            raise InvalidAssertion()

        email = claims.get("email")
        if not email:
            raise MissingEmailClaim()

        return FederatedIdentity(email=email, display_name=claims.get("name") or email)
