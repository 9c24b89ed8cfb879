"""Constants for the translation feature."""

COMPONENT_TRANSLATION = "translation"

# Public endpoint; parameters are filled from TranslatorConfig.
DEFAULT_ENDPOINT = "https://translate.googleapis.com/translate_a/single"
DEFAULT_CLIENT_ID = "gtx"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_CONCURRENCY = 8

# Minimum length of a segment list that carries a translated fragment.
MIN_SEGMENT_LENGTH = 2
