import logging
from functools import wraps

from flask import current_app, g, request

from ..errors import InvalidCredential, NoCredential, VerificationError

logger = logging.getLogger(__name__)


class SessionResolver:
    """Turns the auth cookie of a request into an Identity.

    The signed role is trusted as is; the user table is not consulted.
    """

    def __init__(self, tokens, cookie_name="auth_token"):
        self.tokens = tokens
        self.cookie_name = cookie_name

    def resolve(self, request):
        token = request.cookies.get(self.cookie_name)
        if not token:
            raise NoCredential()
        try:
            identity = self.tokens.verify(token)
        except VerificationError as e:
            logger.info("rejected %s token: %s", e.kind, e)
            raise InvalidCredential() from None
        if not identity.is_complete:
            logger.info("rejected token without user id or role")
            raise InvalidCredential()
        return identity


def login_required(f):
    # AuthError propagates to the app's error handler as a 401
    @wraps(f)
    def wrapper(*args, **kwargs):
        g.identity = current_app.extensions["marks_session"].resolve(request)
        return f(*args, **kwargs)
    return wrapper


def current_identity():
    return g.identity
