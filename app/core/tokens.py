"""
JWT access/refresh token issuance and stateless validation (HS512).

TokenService knows nothing about HTTP. Validation failures are ordinary values
(TokenFailure / None / False), never exceptions, so callers can treat an
invalid token as normal control flow.

There is no revocation store: a token stays valid until its exp claim even if
the user logs out, changes role, or is deleted. The gate's user lookup is the
only thing that stops tokens of deleted accounts.
"""

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any

import jwt

from app.core.config import JWT_SECRET_MIN_BYTES

if TYPE_CHECKING:
    from app.core.config import Settings
    from app.models.user import User

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS512"
TOKEN_ISSUER = "wardrobe-api"
TOKEN_AUDIENCE = "wardrobe-ui"
REQUIRED_CLAIMS = ("exp", "iat", "sub", "jti")

# Custom claim names (camelCase on the wire).
CLAIM_USER_ID = "userId"
CLAIM_EMAIL = "email"
CLAIM_ROLE = "role"
CLAIM_TOKEN_TYPE = "tokenType"


class TokenKind(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


class TokenFailure(str, Enum):
    """Why a token string was rejected."""

    EMPTY = "empty"
    MALFORMED = "malformed"
    EXPIRED = "expired"
    INVALID_SIGNATURE = "invalid_signature"
    UNSUPPORTED = "unsupported"
    INVALID_CLAIMS = "invalid_claims"


@dataclass(frozen=True)
class TokenSettings:
    """Signing secret and lifetimes; passed explicitly to TokenService."""

    secret: str
    access_token_minutes: int = 60
    refresh_token_days: int = 7

    def __post_init__(self) -> None:
        if len((self.secret or "").encode("utf-8")) < JWT_SECRET_MIN_BYTES:
            raise ValueError(
                f"JWT secret must be at least {JWT_SECRET_MIN_BYTES} bytes for HS512"
            )

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TokenSettings":
        return cls(
            secret=settings.JWT_SECRET.get_secret_value(),
            access_token_minutes=settings.JWT_ACCESS_EXPIRE_MINUTES,
            refresh_token_days=settings.JWT_REFRESH_EXPIRE_DAYS,
        )


@dataclass(frozen=True)
class TokenClaims:
    """Verified claim set of a token."""

    subject: str
    user_id: str | None
    email: str | None
    role: str | None
    token_type: str | None
    issuer: str | None
    audience: str | None
    token_id: str
    issued_at: datetime
    expires_at: datetime

    @property
    def is_access(self) -> bool:
        return self.token_type == TokenKind.ACCESS.value

    @property
    def is_refresh(self) -> bool:
        return self.token_type == TokenKind.REFRESH.value

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "TokenClaims":
        audience = payload.get("aud")
        if isinstance(audience, list):
            audience = audience[0] if audience else None
        return cls(
            subject=str(payload["sub"]),
            user_id=payload.get(CLAIM_USER_ID),
            email=payload.get(CLAIM_EMAIL),
            role=payload.get(CLAIM_ROLE),
            token_type=payload.get(CLAIM_TOKEN_TYPE),
            issuer=payload.get("iss"),
            audience=audience,
            token_id=str(payload["jti"]),
            issued_at=datetime.fromtimestamp(payload["iat"], UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], UTC),
        )


def _now() -> datetime:
    return datetime.now(UTC)


class TokenService:
    """Mints and verifies signed claim sets for users."""

    def __init__(
        self,
        token_settings: TokenSettings,
        clock: Callable[[], datetime] = _now,
    ) -> None:
        self._key = token_settings.secret.encode("utf-8")
        self._access_lifetime = timedelta(minutes=token_settings.access_token_minutes)
        self._refresh_lifetime = timedelta(days=token_settings.refresh_token_days)
        self._clock = clock

    @property
    def access_token_expires_in(self) -> int:
        """Access token lifetime in seconds (the `expiresIn` of auth responses)."""
        return int(self._access_lifetime.total_seconds())

    def issue_access_token(self, user: "User") -> str:
        return self._issue(user, TokenKind.ACCESS, self._access_lifetime)

    def issue_refresh_token(self, user: "User") -> str:
        return self._issue(user, TokenKind.REFRESH, self._refresh_lifetime)

    def _issue(self, user: "User", kind: TokenKind, lifetime: timedelta) -> str:
        now = self._clock()
        role = getattr(user.role, "value", user.role)
        payload: dict[str, Any] = {
            "sub": user.username,
            "iss": TOKEN_ISSUER,
            "aud": TOKEN_AUDIENCE,
            "jti": str(uuid.uuid4()),
            "iat": now,
            "exp": now + lifetime,
            CLAIM_USER_ID: str(user.id),
            CLAIM_EMAIL: user.email,
            CLAIM_ROLE: role,
            CLAIM_TOKEN_TYPE: kind.value,
        }
        return jwt.encode(
            payload,
            self._key,
            algorithm=JWT_ALGORITHM,
            headers={"typ": "JWT"},
        )

    def validate(self, token: str | None) -> TokenClaims | TokenFailure:
        """Verify signature, structure, expiry, issuer and audience."""
        if token is None or (isinstance(token, str) and not token.strip()):
            logger.info("Rejected token: empty or missing")
            return TokenFailure.EMPTY
        if not isinstance(token, str):
            logger.warning("Rejected token: not a string")
            return TokenFailure.MALFORMED
        if token.count(".") != 2:
            logger.warning("Rejected token: not three dot-separated segments")
            return TokenFailure.MALFORMED
        try:
            # Stricter than signature and expiry alone: iss and aud must match, and
            # sub, exp, iat and jti must be present.
            payload = jwt.decode(
                token,
                self._key,
                algorithms=[JWT_ALGORITHM],
                audience=TOKEN_AUDIENCE,
                issuer=TOKEN_ISSUER,
                options={"require": list(REQUIRED_CLAIMS)},
            )
            return TokenClaims.from_payload(payload)
        except jwt.ExpiredSignatureError as e:
            return self._reject(TokenFailure.EXPIRED, e)
        except jwt.InvalidSignatureError as e:
            return self._reject(TokenFailure.INVALID_SIGNATURE, e)
        except jwt.InvalidAlgorithmError as e:
            return self._reject(TokenFailure.UNSUPPORTED, e)
        except jwt.DecodeError as e:
            return self._reject(TokenFailure.MALFORMED, e)
        except jwt.InvalidTokenError as e:
            return self._reject(TokenFailure.INVALID_CLAIMS, e)
        except (KeyError, TypeError, ValueError, OverflowError) as e:
            # Claims that pass PyJWT but cannot be mapped (e.g. non-numeric iat).
            return self._reject(TokenFailure.INVALID_CLAIMS, e)

    def _reject(self, failure: TokenFailure, error: Exception) -> TokenFailure:
        logger.warning(
            "Rejected token: %s",
            error,
            extra={"token_failure": failure.value},
        )
        return failure

    def validate_and_parse(self, token: str | None) -> TokenClaims | None:
        result = self.validate(token)
        return result if isinstance(result, TokenClaims) else None

    def extract_username(self, token: str | None) -> str | None:
        claims = self.validate_and_parse(token)
        return claims.subject if claims else None

    def is_access_token(self, token: str | None) -> bool:
        claims = self.validate_and_parse(token)
        return claims is not None and claims.is_access

    def is_refresh_token(self, token: str | None) -> bool:
        claims = self.validate_and_parse(token)
        return claims is not None and claims.is_refresh
