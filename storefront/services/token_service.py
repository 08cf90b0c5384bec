# storefront/services/token_service.py
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone, timedelta

import jwt
import redis

from storefront.domain.errors import AuthenticationFailed
from storefront.utils.retry import redis_retry
from storefront.utils.settings import JWT_SECRET, JWT_ALGORITHM, JWT_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthContext:
    """Identity attached to a single authenticated request."""

    id: int
    email: str
    name: str
    jti: str
    expires_at: datetime

    def public(self) -> dict:
        return {"id": self.id, "email": self.email, "name": self.name}


class RevocationStore:
    """
    -revoked token ids (logout)
    -keys expire together with the token, nothing to clean up
    """

    def __init__(self, client: redis.Redis):
        self.redis = client

    @staticmethod
    def _key(jti: str) -> str:
        return f"token:{jti}:revoked"

    @redis_retry()
    def revoke(self, jti: str, ttl: int) -> bool:
        key = self._key(jti)
        logger.info(f"Revoke {key} for {ttl}s")
        #SET token:<jti>:revoked 1 NX EX <ttl>
        return bool(self.redis.set(name=key, value="1", nx=True, ex=max(ttl, 1)))

    @redis_retry()
    def is_revoked(self, jti: str) -> bool:
        return bool(self.redis.exists(self._key(jti)))


class TokenService:
    def __init__(
        self,
        revocations: RevocationStore,
        secret: str = JWT_SECRET,
        algorithm: str = JWT_ALGORITHM,
        ttl_seconds: int = JWT_TTL_SECONDS,
    ):
        self.revocations = revocations
        self.secret = secret
        self.algorithm = algorithm
        self.ttl_seconds = ttl_seconds

    def issue(self, user_id: int, email: str, name: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "email": email,
            "name": name,
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + timedelta(seconds=self.ttl_seconds),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> AuthContext:
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "jti", "exp"]},
            )
        except jwt.PyJWTError as e:
            logger.info(f"Rejected token: {e}")
            raise AuthenticationFailed("Not authenticated") from e

        if self.revocations.is_revoked(claims["jti"]):
            raise AuthenticationFailed("Not authenticated")

        return AuthContext(
            id=int(claims["sub"]),
            email=claims.get("email", ""),
            name=claims.get("name", ""),
            jti=claims["jti"],
            expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
        )

    def revoke(self, ctx: AuthContext) -> None:
        remaining = int((ctx.expires_at - datetime.now(timezone.utc)).total_seconds())
        self.revocations.revoke(ctx.jti, remaining)
