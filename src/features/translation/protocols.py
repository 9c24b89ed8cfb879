"""Protocol interface for text translators."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class TextTranslator(Protocol):
    """Protocol for single-text translation clients.

    Any object implementing ``translate`` with the matching signature can
    be used by the batch engine, including in-memory test doubles.
    """

    def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        """Translate one text.

        Args:
            text: Source text.
            source_lang: Source language code.
            target_lang: Target language code.

        Returns:
            Translated text, possibly empty.

        Raises:
            RemoteError: If the service call fails.
            MalformedResponseError: If the response cannot be decoded.
        """
        ...
