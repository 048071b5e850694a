"""
Credential resolution for print queue submissions.

Two schemes produce a Credential:
- Bearer JWT tokens (HS256) signed with the configured secret; the token's
  subject becomes the owner key.
- The legacy origin allow-list: a Referer/Origin header containing one of the
  allowed substrings maps to the shared placeholder key.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping, Optional

import jwt

from braille_printer.core.config import PrintQSettings

logger = logging.getLogger(__name__)

ISSUER = "braille-printer"
AUDIENCE = "braille-printer"


class Unauthorized(Exception):
    """The request carries no acceptable credential."""


@dataclass(frozen=True)
class Credential:
    owner_key: str
    source: str  # "token" or "origin"


class TokenAuth:
    """
    JWT helper for issuing and verifying owner tokens.
    """

    algorithm = "HS256"

    def __init__(self, secret_key: str, token_expiry_days: int = 90):
        if not secret_key:
            raise ValueError("secret_key is required")
        self.secret_key = secret_key
        self.token_expiry_days = token_expiry_days

    def generate_token(self, owner_key: str, extra_claims: Optional[Dict[str, Any]] = None) -> str:
        """
        Generate a signed token whose subject is `owner_key`.
        """
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "sub": owner_key,
            "iat": now,
            "exp": now + timedelta(days=self.token_expiry_days),
            "iss": ISSUER,
            "aud": AUDIENCE,
        }
        if extra_claims:
            payload.update(extra_claims)
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> Credential:
        """
        Verify a token and return its Credential. Raises Unauthorized on any failure.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                issuer=ISSUER,
                audience=AUDIENCE,
            )
        except jwt.ExpiredSignatureError as e:
            logger.warning("JWT token has expired")
            raise Unauthorized("token expired") from e
        except jwt.InvalidTokenError as e:
            logger.warning("Invalid JWT token: %s", e)
            raise Unauthorized("invalid token") from e

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise Unauthorized("token has no subject")
        return Credential(owner_key=subject, source="token")


def _bearer_token(headers: Mapping[str, str]) -> Optional[str]:
    value = headers.get("Authorization") or ""
    scheme, _, token = value.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def resolve_credential(headers: Mapping[str, str], settings: PrintQSettings) -> Credential:
    """
    Resolve the caller's credential from request headers.

    A bearer token, when present, must verify; there is no fallback to the
    origin scheme after a bad token. Raises Unauthorized.
    """
    token = _bearer_token(headers)
    if token is not None:
        if not settings.jwt_secret:
            raise Unauthorized("token authentication is not configured")
        return TokenAuth(settings.jwt_secret).verify_token(token)

    origin = headers.get("Referer") or headers.get("Origin") or ""
    if any(allowed in origin for allowed in settings.allowed_origins):
        return Credential(owner_key=settings.example_auth_key, source="origin")
    raise Unauthorized("origin not allowed")


def generate_token_cli(argv: Optional[list[str]] = None) -> str:
    """CLI entry point: print a bearer token for an owner key."""
    import argparse

    from braille_printer.core.config import load_settings

    parser = argparse.ArgumentParser(description="Generate a Braille Printer bearer token")
    parser.add_argument("owner_key", nargs="?", default="brailleprinter-user")
    parser.add_argument("--days", type=int, default=90, help="token lifetime in days")
    args = parser.parse_args(argv)

    settings = load_settings()
    if not settings.jwt_secret:
        print("BRAILLEPRINTER_JWT_SECRET is not set", file=sys.stderr)
        raise SystemExit(2)

    token = TokenAuth(settings.jwt_secret, token_expiry_days=args.days).generate_token(args.owner_key)
    print(f"Generated token for owner key '{args.owner_key}' (expires in {args.days} days):")
    print(token)
    print()
    print("Send it as:")
    print(f"Authorization: Bearer {token}")
    return token


__all__ = ["Credential", "TokenAuth", "Unauthorized", "generate_token_cli", "resolve_credential"]
