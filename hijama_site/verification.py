"""Bot verification (reCAPTCHA v3 style) token sources."""
from __future__ import annotations

from typing import Optional, Protocol

from loguru import logger

from .exceptions import VerificationError, VerificationFailed, VerificationUnavailable

SUBMIT_ACTION = "submit"


class TokenVerifier(Protocol):
    async def get_token(self, site_key: str, action: str) -> str:
        """Return a one-time token for ``action`` or raise a VerificationError."""
        ...


class ClientTokenVerifier:
    """Token obtained by the visitor's browser and forwarded with the form.

    The browser runs the widget for the public site key; the server only
    passes the resulting token along to the form endpoint.
    """

    def __init__(self, token: Optional[str]):
        self._token = token

    def __repr__(self) -> str:
        return "ClientTokenVerifier(token='***')" if self._token else "ClientTokenVerifier(token=None)"

    async def get_token(self, site_key: str, action: str) -> str:
        if not self._token:
            raise VerificationUnavailable("No verification token supplied by the client")
        return self._token


class NoVerifier:
    """Used where verification is switched off; never yields a token."""

    async def get_token(self, site_key: str, action: str) -> str:
        raise VerificationUnavailable("Verification is not configured")


async def acquire_token(verifier: TokenVerifier, site_key: str, action: str = SUBMIT_ACTION) -> str:
    """Ask the collaborator for a token; every failure becomes a VerificationError."""
    try:
        token = await verifier.get_token(site_key, action)
    except VerificationError:
        raise
    except Exception as e:
        raise VerificationFailed(str(e) or e.__class__.__name__, {"action": action}) from e
    if not token:
        raise VerificationFailed("Empty verification token", {"action": action})
    logger.debug(f"Verification token acquired for action {action!r}")
    return token
