"""Bearer token validation for tokens issued at login.

Login signs tokens with a shared secret and puts the account id in a
configurable claim. Nothing else about the token is trusted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError

if TYPE_CHECKING:
    from shared_kernel.auth.observability import JWTValidatorProbe

_DECODE_OPTIONS = {
    "verify_signature": True,
    "verify_exp": True,
    "verify_iat": True,
    "verify_aud": False,
}


@dataclass(frozen=True)
class TokenClaims:
    """Claims of an accepted token."""

    user_id: str
    email: str | None


class InvalidTokenError(Exception):
    """Raised when a bearer token is rejected."""

    pass


class JWTValidator:
    """Checks the signature and expiry of shared-secret tokens.

    Tokens without ``exp`` are accepted; login has always issued long-lived
    tokens and revocation is not handled here.
    """

    def __init__(
        self,
        secret: str,
        probe: JWTValidatorProbe,
        algorithm: str = "HS256",
        user_id_claim: str = "id",
    ):
        """Initialize the validator.

        Args:
            secret: Shared signing secret
            probe: Observability probe
            algorithm: The only signing algorithm accepted
            user_id_claim: Claim carrying the account id

        Raises:
            ValueError: If the secret is empty
        """
        if not secret:
            raise ValueError("JWT secret must not be empty")

        self._secret = secret
        self._probe = probe
        self._algorithm = algorithm
        self._user_id_claim = user_id_claim

    def validate_token(self, token: str) -> TokenClaims:
        """Validate a bearer token and extract the account it belongs to.

        Raises:
            InvalidTokenError: If the token is expired, tampered with,
                malformed, or carries no user id
        """
        claims = self._decode(token)

        user_id = claims.get(self._user_id_claim)
        if user_id is None or not str(user_id).strip():
            self._probe.claim_missing(self._user_id_claim)
            raise InvalidTokenError(f"Missing required claim: {self._user_id_claim}")

        email = claims.get("email")
        self._probe.token_validated(user_id=str(user_id))

        return TokenClaims(
            user_id=str(user_id),
            email=None if email is None else str(email),
        )

    def _decode(self, token: str) -> dict[str, Any]:
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options=_DECODE_OPTIONS,
            )
        except ExpiredSignatureError as e:
            self._probe.token_expired()
            raise InvalidTokenError("Token has expired") from e
        except JWTClaimsError as e:
            self._probe.token_rejected(reason=f"claims: {e}")
            raise InvalidTokenError(f"Invalid token claims: {e}") from e
        except JWTError as e:
            self._probe.token_rejected(reason=str(e))
            raise InvalidTokenError(f"Invalid token: {e}") from e
