"""Translation Proxy — LibreTranslate with math spans kept intact.

Flow:
    1. Reject blank text before touching the network.
    2. Mask math spans (latex_guard.protect).
    3. POST the masked text to ``<base>/translate``.
    4. Unmask the translated text and return it.
"""

import logging
from typing import Optional

import requests

from integralforme.shared.errors import (
    TranslationValidationError,
    UpstreamHTTPError,
    UpstreamProtocolError,
    UpstreamTransportError,
)
from integralforme.shared.services.latex_guard import protect, restore

logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "en"
DEFAULT_TARGET = "pt"
DEFAULT_TIMEOUT = 15.0


class TranslationProxy:
    """Single-attempt translation through a LibreTranslate-compatible API."""

    service_name = "translation service"

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
        default_source: str = DEFAULT_SOURCE,
        default_target: str = DEFAULT_TARGET,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout
        self.default_source = default_source
        self.default_target = default_target

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/translate"

    def build_payload(self, text: str, source: str, target: str) -> dict:
        payload = {"q": text, "source": source, "target": target, "format": "text"}
        if self.api_key:
            payload["api_key"] = self.api_key
        return payload

    def translate(
        self,
        text: Optional[str],
        source: Optional[str] = None,
        target: Optional[str] = None,
    ) -> str:
        """Translate ``text``, returning it with every math span untouched."""
        if not text or not text.strip():
            raise TranslationValidationError("text is required")

        source = self.default_source if source is None else source
        target = self.default_target if target is None else target
        masked = protect(text)
        logger.info(
            "Translating %d chars %s→%s (%d math span(s) masked)",
            len(text),
            source,
            target,
            len(masked.substitutions),
        )

        try:
            response = self.session.post(
                self.endpoint,
                json=self.build_payload(masked.text, source, target),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Translation service unreachable: %s", exc)
            raise UpstreamTransportError(self.service_name, str(exc)) from exc

        if not 200 <= response.status_code < 300:
            logger.warning("Translation service returned %d", response.status_code)
            raise UpstreamHTTPError(
                self.service_name,
                response.status_code,
                response.text,
                content_type=response.headers.get("Content-Type"),
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise UpstreamProtocolError(self.service_name, "Invalid translate response") from exc

        translated = data.get("translatedText") if isinstance(data, dict) else None
        if not isinstance(translated, str) or not translated:
            logger.warning("Translation service response lacks translatedText")
            raise UpstreamProtocolError(self.service_name, "Invalid translate response")

        return restore(translated, masked.substitutions)
