# aula/app/core/exceptions.py
"""
Error taxonomy shared by the services and the HTTP layer.

Every error carries the status code the API answers with; the handler in
aula.app.main turns them into {"error": message} responses.
"""


class AulaError(Exception):
    status_code = 500
    message = "internal error"

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


# ── 400: caller sent something incomplete ────────────────────────
class ValidationError(AulaError):
    status_code = 400
    message = "invalid request"


class MissingFields(ValidationError):
    message = "missing fields"


class MissingSid(ValidationError):
    message = "missing student sid"


class MissingIdToken(ValidationError):
    message = "missing idToken"


class MissingEmailClaim(ValidationError):
    message = "token missing email"


class BundleVersionError(ValidationError):
    message = "unsupported bundle version"


# ── 401: who are you? ────────────────────────────────────────────
class AuthenticationError(AulaError):
    status_code = 401
    message = "unauthorized"


class InvalidCredentials(AuthenticationError):
    message = "invalid credentials"


class Unauthorized(AuthenticationError):
    message = "invalid token"


class InvalidAssertion(AuthenticationError):
    message = "invalid id token"


class InvalidTokenSignature(AuthenticationError):
    message = "invalid token signature"


class TokenExpired(AuthenticationError):
    message = "token expired"


# ── 400: already there ───────────────────────────────────────────
class ConflictError(AulaError):
    status_code = 400
    message = "conflict"


class UserAlreadyExists(ConflictError):
    message = "username already exists"


class StudentConflict(ConflictError):
    message = "student sid already exists"


# ── 404 ──────────────────────────────────────────────────────────
class NotFoundError(AulaError):
    status_code = 404
    message = "not found"


class StudentNotFound(NotFoundError):
    message = "student not found"


# ── 500 ──────────────────────────────────────────────────────────
class StoreError(AulaError):
    status_code = 500
    message = "database error"


class ConfigurationError(AulaError):
    status_code = 500
    message = "server misconfigured"


class IdentityNotConfigured(ConfigurationError):
    message = "server not configured: missing GOOGLE_CLIENT_ID"


# ── Credential store internals ───────────────────────────────────
# The gateway collapses both into InvalidCredentials before answering.
class CredentialNotFound(AulaError):
    status_code = 401
    message = "user not found"


class PasswordMismatch(AulaError):
    status_code = 401
    message = "password mismatch"
