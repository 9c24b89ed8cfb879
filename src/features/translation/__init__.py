"""Batch translation of record fields."""

from src.features.translation.client import GoogleTranslateClient
from src.features.translation.config import TranslatorConfig
from src.features.translation.engine import BatchTranslationEngine
from src.features.translation.errors import (
    DirectiveValidationError,
    MalformedResponseError,
    RecordParseError,
    RemoteError,
    TranslationError,
    TranslationFailure,
)
from src.features.translation.factory import create_engine
from src.features.translation.models import (
    BatchResult,
    Directive,
    Record,
    TranslateRequest,
    UnitFailure,
)


__all__ = [
    "BatchResult",
    "BatchTranslationEngine",
    "Directive",
    "DirectiveValidationError",
    "GoogleTranslateClient",
    "MalformedResponseError",
    "Record",
    "RecordParseError",
    "RemoteError",
    "TranslateRequest",
    "TranslationError",
    "TranslationFailure",
    "TranslatorConfig",
    "UnitFailure",
    "create_engine",
]
