"""Exception types shared by the auth core and the API blueprints.

Each error that reaches a handler maps to one HTTP status; the message sent
to the client is a fixed string so nothing internal leaks out.
"""


class MarksError(Exception):
    status_code = 500
    message = "Internal Server Error"

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class ConfigError(MarksError):
    """Raised at startup when required configuration is missing."""


# --- token verification (internal kinds, logged but never shown) ---

class VerificationError(MarksError):
    kind = "invalid"


class Malformed(VerificationError):
    kind = "malformed"


class BadSignature(VerificationError):
    kind = "bad_signature"


class Expired(VerificationError):
    kind = "expired"


# --- authentication ---

class AuthError(MarksError):
    status_code = 401
    message = "Unauthorized"


class NoCredential(AuthError):
    message = "Unauthorized: No token provided"


class InvalidCredential(AuthError):
    message = "Unauthorized: Invalid or expired token"


# --- authorization ---

class AuthorizationError(MarksError):
    status_code = 403
    message = "Forbidden"


class Forbidden(AuthorizationError):
    def __init__(self, reason="forbidden"):
        super().__init__(f"Forbidden: {reason}")
        self.reason = reason


# --- request problems ---

class ValidationError(MarksError):
    status_code = 400
    message = "Invalid input data"


class Conflict(MarksError):
    status_code = 409
    message = "Conflict"
