"""Data models for batch record translation."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Annotated

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    JsonValue,
    field_validator,
)

from src.features.translation.errors import TranslationError, TranslationFailure


RecordValue = JsonValue
Record = dict[str, RecordValue]


class Directive(BaseModel):
    """Rule mapping one source field to one destination field.

    Accepts both the wire names (``key``, ``newKey``, ``targetLang``) and
    the attribute names. ``target_key`` defaults to an empty string so that
    a missing key is reported by the engine against the directive index
    instead of being rejected during parsing. An empty ``source_key`` is
    accepted and matches only a field with an empty name.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    source_key: str = Field(
        validation_alias=AliasChoices("key", "source_key"),
        serialization_alias="key",
    )
    target_key: str = Field(
        default="",
        validation_alias=AliasChoices("newKey", "target_key"),
        serialization_alias="newKey",
    )
    target_lang: Annotated[str, Field(min_length=1)] = Field(
        validation_alias=AliasChoices("targetLang", "target_lang"),
        serialization_alias="targetLang",
    )

    @field_validator("target_key", mode="before")
    @classmethod
    def none_as_empty(cls, v: object) -> object:
        """Treat an explicit null target key like a missing one."""
        return "" if v is None else v

    @property
    def renames(self) -> bool:
        """Whether applying this directive removes the source key."""
        return self.target_key != self.source_key


class TranslateRequest(BaseModel):
    """Inbound body of a batch translation request."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    items: list[dict[str, RecordValue]]
    keys_to_translate: list[Directive] = Field(
        validation_alias=AliasChoices("keysToTranslate", "keys_to_translate")
    )
    source_lang: Annotated[str, Field(min_length=1)] = Field(
        validation_alias=AliasChoices("sourceLang", "source_lang")
    )


def record_text(value: RecordValue) -> str | None:
    """Return the text to translate for a record value.

    Falsy values (empty string, zero, null, false) yield None and produce
    no work unit, as do nested objects and arrays, which pass through
    untouched. Numbers and booleans are spelled the way JSON spells them.

    Args:
        value: Record field value.

    Returns:
        Text to send to the translator, or None to skip.
    """
    if not value:
        return None
    if isinstance(value, (dict, list)):
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


@dataclass(frozen=True)
class WorkUnit:
    """One (directive, record) pairing selected for translation.

    Attributes:
        directive_index: Position of the directive in the input list.
        record_index: Position of the record in the input list.
        directive: Directive that produced this unit.
        text: Source text captured when the unit was built.
    """

    directive_index: int
    record_index: int
    directive: Directive
    text: str


@dataclass(frozen=True)
class UnitFailure:
    """A work unit whose translation call failed.

    Attributes:
        directive_index: Position of the directive in the input list.
        record_index: Position of the record in the input list.
        source_key: Field the text was read from.
        target_key: Field the translation would have been written to.
        text: Source text.
        source_lang: Source language code.
        target_lang: Target language code.
        error: The error raised by the translator.
    """

    directive_index: int
    record_index: int
    source_key: str
    target_key: str
    text: str
    source_lang: str
    target_lang: str
    error: TranslationError

    @classmethod
    def from_unit(
        cls, unit: WorkUnit, source_lang: str, error: TranslationError
    ) -> UnitFailure:
        """Build a failure record from the unit that produced it."""
        return cls(
            directive_index=unit.directive_index,
            record_index=unit.record_index,
            source_key=unit.directive.source_key,
            target_key=unit.directive.target_key,
            text=unit.text,
            source_lang=source_lang,
            target_lang=unit.directive.target_lang,
            error=error,
        )

    def to_dict(self) -> dict[str, object]:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "directive_index": self.directive_index,
            "record_index": self.record_index,
            "source_key": self.source_key,
            "target_key": self.target_key,
            "text": self.text,
            "source_lang": self.source_lang,
            "target_lang": self.target_lang,
            "error": self.error.to_dict(),
        }


@dataclass
class BatchResult:
    """Result of a batch translation.

    ``records`` is the caller's own list; successful units have already
    been applied to it in place.
    """

    records: list[Record]
    failures: list[UnitFailure] = field(default_factory=list)
    units_dispatched: int = 0
    units_succeeded: int = 0
    units_skipped: int = 0
    duration_ms: float = 0.0

    @property
    def success(self) -> bool:
        """Check if every dispatched unit succeeded."""
        return not self.failures

    def raise_for_failures(self) -> None:
        """Raise TranslationFailure if any unit failed.

        Raises:
            TranslationFailure: Carrying every failed unit.
        """
        if self.failures:
            raise TranslationFailure(self.failures)
