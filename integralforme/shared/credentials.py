"""Puzzle store credential resolution.

Resolution order:
    1. SUPABASE_ANON_KEY (carried on Settings.store_api_key).
    2. The value this chain already resolved earlier in the process.
    3. Development fallback: a bearer token scraped from
       ``Settings.credentials_file`` (off unless configured).
    4. Nothing: requests go out unauthenticated and the store's 401 is
       passed through like any other upstream status.

The memo only ever moves from "unresolved" to "resolved", so concurrent
readers need no lock; two threads racing the first resolution derive the
same value.
"""

import logging
import re
from pathlib import Path
from typing import Optional

from integralforme.shared.config import Settings

logger = logging.getLogger(__name__)

BEARER_PATTERN = re.compile(r"Authorization:\s*Bearer\s+([A-Za-z0-9._-]+)")

# Sentinel for "resolved to no credential"
_NONE = ""


class StoreCredentialChain:
    """Ordered credential lookup for the puzzle store."""

    def __init__(self, api_key: Optional[str] = None, credentials_file: Optional[Path] = None):
        self.api_key = api_key
        self.credentials_file = credentials_file
        self._resolved: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "StoreCredentialChain":
        return cls(api_key=settings.store_api_key, credentials_file=settings.credentials_file)

    def resolve(self) -> Optional[str]:
        """Return the store key, or None when running unauthenticated."""
        if self.api_key:
            return self.api_key

        if self._resolved is not None:
            return self._resolved or None

        token = self._read_credentials_file()
        self._resolved = token or _NONE

        if token:
            logger.warning(
                "Using bearer token from %s (development fallback); set SUPABASE_ANON_KEY instead.",
                self.credentials_file,
            )
        else:
            logger.warning("No puzzle store credential configured; requests will be unauthenticated.")
        return token

    def _read_credentials_file(self) -> Optional[str]:
        if not self.credentials_file:
            return None
        try:
            content = Path(self.credentials_file).read_text(encoding="utf-8")
        except OSError as exc:
            logger.info("Credentials file %s unreadable: %s", self.credentials_file, exc)
            return None

        match = BEARER_PATTERN.search(content)
        return match.group(1) if match else None


def resolve_store_credential(settings: Settings) -> Optional[str]:
    """One-shot helper: build the chain from settings and resolve it."""
    return StoreCredentialChain.from_settings(settings).resolve()
