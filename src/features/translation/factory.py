"""Factory for wiring the translation client and engine."""

import structlog

from src.features.translation.client import GoogleTranslateClient
from src.features.translation.config import TranslatorConfig
from src.features.translation.constants import COMPONENT_TRANSLATION
from src.features.translation.engine import BatchTranslationEngine
from src.features.translation.protocols import TextTranslator


logger = structlog.get_logger()


def create_engine(
    config: TranslatorConfig | None = None,
    translator: TextTranslator | None = None,
) -> BatchTranslationEngine:
    """Create a batch engine backed by the HTTP client unless one is given.

    Args:
        config: Endpoint, timeout, concurrency and failure policy.
        translator: Optional translator to use instead of the HTTP client.

    Returns:
        A configured BatchTranslationEngine.
    """
    config = config or TranslatorConfig()
    if translator is None:
        translator = GoogleTranslateClient(config)

    logger.bind(component=COMPONENT_TRANSLATION, subcomponent="factory").info(
        "translation_engine_created",
        translator=type(translator).__name__,
        max_concurrency=config.max_concurrency,
        fail_fast=config.fail_fast,
    )
    return BatchTranslationEngine(translator, config)
