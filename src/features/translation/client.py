"""HTTP client for the public text translation endpoint."""

from http import HTTPStatus

import httpx
import structlog

from src.features.translation.config import TranslatorConfig
from src.features.translation.constants import COMPONENT_TRANSLATION
from src.features.translation.errors import MalformedResponseError, RemoteError
from src.features.translation.response import extract_translated_text


logger = structlog.get_logger()


class GoogleTranslateClient:
    """Client for the ``translate_a/single`` endpoint.

    Stateless apart from its configuration: every call issues exactly one
    GET request with no caching and no retry, so it is safe to share
    across worker threads.
    """

    def __init__(self, config: TranslatorConfig | None = None) -> None:
        """Initialize the client.

        Args:
            config: Endpoint, client id and timeout. Defaults to the
                public endpoint.
        """
        self._config = config or TranslatorConfig()
        self._log = logger.bind(component=COMPONENT_TRANSLATION, subcomponent="client")

    @property
    def config(self) -> TranslatorConfig:
        """Get the client configuration."""
        return self._config

    def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        """Translate one text.

        Args:
            text: Source text.
            source_lang: Source language code.
            target_lang: Target language code.

        Returns:
            Translated text; empty when the service returned no fragments.

        Raises:
            RemoteError: On transport errors or a non-2xx status.
            MalformedResponseError: If the body is not the expected
                nested-list JSON.
        """
        response = self._send_request(text, source_lang, target_lang)

        if not HTTPStatus.OK <= response.status_code < HTTPStatus.MULTIPLE_CHOICES:
            self._log.warning(
                "translate_request_rejected",
                status=response.status_code,
                source_lang=source_lang,
                target_lang=target_lang,
            )
            msg = f"Translation service returned {response.status_code}"
            raise RemoteError(msg, status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as exc:
            msg = f"Translation response is not valid JSON: {exc}"
            raise MalformedResponseError(msg) from exc

        translated = extract_translated_text(payload)
        self._log.debug(
            "translate_request_complete",
            source_lang=source_lang,
            target_lang=target_lang,
            chars_in=len(text),
            chars_out=len(translated),
        )
        return translated

    def _send_request(
        self, text: str, source_lang: str, target_lang: str
    ) -> httpx.Response:
        """Send the translation HTTP request.

        Raises:
            RemoteError: On network errors.
        """
        try:
            return httpx.get(
                self._config.endpoint,
                params=self._config.build_params(text, source_lang, target_lang),
                timeout=self._config.timeout_seconds,
            )
        except httpx.HTTPError as exc:
            self._log.warning(
                "translate_request_failed",
                error=str(exc),
                source_lang=source_lang,
                target_lang=target_lang,
            )
            msg = f"Translation request failed: {exc}"
            raise RemoteError(msg) from exc
