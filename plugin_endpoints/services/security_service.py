"""Security service for access token management"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional, Tuple
from jose import JWTError, jwt
from plugin_endpoints.config import settings


@dataclass(frozen=True)
class Actor:
    """The authenticated caller, as described by its access token"""
    id: str
    roles: Tuple[str, ...] = field(default_factory=tuple)


class SecurityService:
    """Issues and verifies the JWT access tokens the endpoints accept"""

    def __init__(self, secret_key: str = None, algorithm: str = None):
        self.secret_key = secret_key or settings.SECRET_KEY
        self.algorithm = algorithm or settings.ALGORITHM

    def create_access_token(self, subject: str, roles: Iterable[str] = (),
                            expires_delta: Optional[timedelta] = None) -> str:
        """Create a JWT access token carrying the actor's roles"""
        expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=15))
        to_encode = {"sub": subject, "roles": list(roles), "exp": expire, "type": "access"}
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> Optional[dict]:
        """Decode and verify a JWT token"""
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            return None

    def actor_from_token(self, token: str) -> Optional[Actor]:
        payload = self.decode_token(token)
        if not payload or payload.get("type") != "access" or not payload.get("sub"):
            return None
        roles = payload.get("roles") or []
        if isinstance(roles, str):
            roles = [roles]
        return Actor(id=str(payload["sub"]), roles=tuple(str(r) for r in roles))


# Singleton instance
security_service = SecurityService()
