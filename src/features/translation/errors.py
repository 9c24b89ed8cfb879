"""Error types for record field translation."""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from src.features.translation.models import Directive, UnitFailure


class TranslationError(Exception):
    """Base exception for translation errors.

    Provides structured error information for logging and API responses.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, object]:
        """Convert error to dictionary for logging/serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {"error_type": type(self).__name__, "message": self.message}


class DirectiveValidationError(TranslationError):
    """A directive is malformed (empty target key).

    Raised before any work unit is built or any remote call is issued.

    Attributes:
        index: Position of the offending directive in the input list.
        directive: The offending directive.
    """

    def __init__(self, index: int, directive: Directive, message: str) -> None:
        super().__init__(message)
        self.index = index
        self.directive = directive

    def to_dict(self) -> dict[str, object]:
        data = super().to_dict()
        data["directive_index"] = self.index
        data["source_key"] = self.directive.source_key
        return data


class RemoteError(TranslationError):
    """Translation service call failure.

    Attributes:
        status_code: HTTP status code, 0 for transport errors.
    """

    def __init__(self, message: str, status_code: int = 0) -> None:
        super().__init__(message)
        self.status_code = status_code

    def to_dict(self) -> dict[str, object]:
        data = super().to_dict()
        data["status_code"] = self.status_code
        return data


class MalformedResponseError(TranslationError):
    """Translation service payload is not the expected nested-list shape."""


class RecordParseError(TranslationError):
    """Uploaded record text is not a JSON array of objects."""


class TranslationFailure(TranslationError):
    """One or more work units of a batch failed.

    Attributes:
        failures: Every failed unit, in unit order.
    """

    def __init__(self, failures: list[UnitFailure]) -> None:
        first = failures[0]
        message = (
            f"{len(failures)} translation unit(s) failed; first: "
            f"key '{first.source_key}' text {first.text!r} "
            f"({first.source_lang} -> {first.target_lang}): {first.error}"
        )
        super().__init__(message)
        self.failures = failures

    def to_dict(self) -> dict[str, object]:
        data = super().to_dict()
        data["failures"] = [f.to_dict() for f in self.failures]
        return data
