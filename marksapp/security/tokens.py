import logging
import time

import itsdangerous
from itsdangerous import URLSafeSerializer

from ..errors import BadSignature, ConfigError, Expired, Malformed
from .identity import Identity, Role

logger = logging.getLogger(__name__)

DEFAULT_TTL = 60 * 60 * 24


class TokenService:
    """Issues and verifies signed, time-limited identity tokens.

    A token is the itsdangerous encoding of the identity claims plus
    ``iat``/``exp`` epoch seconds. Nothing is stored server side, so a token
    stays valid until it expires or the client throws it away.
    """

    def __init__(self, secret, ttl=DEFAULT_TTL, clock=time.time, salt="auth-token"):
        if not secret:
            raise ConfigError("SECRET_KEY is not configured")
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self.ttl = ttl
        self.clock = clock
        self._serializer = URLSafeSerializer(secret, salt=salt)

    @classmethod
    def from_config(cls, config):
        return cls(config.get("SECRET_KEY"),
                   ttl=config.get("AUTH_TOKEN_TTL", DEFAULT_TTL))

    def issue(self, identity, ttl=None):
        ttl = self.ttl if ttl is None else ttl
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        now = self.clock()
        claims = {
            "uid": identity.user_id,
            "name": identity.name,
            "email": identity.email,
            "role": identity.role.value if identity.role else None,
            "iat": now,
            "exp": now + ttl,
        }
        return self._serializer.dumps(claims)

    def verify(self, token):
        if not isinstance(token, str):
            raise Malformed("token is not a string")
        value, sep, sig = token.rpartition(".")
        if not sep or not value.strip(".") or not sig:
            raise Malformed("token has no signature")

        try:
            claims = self._serializer.loads(token)
        except itsdangerous.BadPayload as e:
            raise Malformed(f"payload cannot be decoded: {e}") from None
        except itsdangerous.BadSignature:
            raise BadSignature("signature does not match") from None

        if not isinstance(claims, dict):
            raise Malformed("payload is not an object")
        exp = claims.get("exp")
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            raise Malformed("payload has no usable expiry")
        if self.clock() >= exp:
            raise Expired("token has expired")

        role = claims.get("role")
        if role is not None:
            try:
                role = Role.parse(role)
            except ValueError:
                raise Malformed(f"unknown role {role!r}") from None
        return Identity(
            user_id=claims.get("uid"),
            name=claims.get("name"),
            email=claims.get("email"),
            role=role,
        )
