"""Parsing of the translation service's nested-list payload."""

from src.features.translation.constants import MIN_SEGMENT_LENGTH
from src.features.translation.errors import MalformedResponseError


def extract_translated_text(payload: object) -> str:
    """Concatenate translated fragments from a decoded payload.

    The payload is a list whose first element is a list of segments.
    Each segment is itself a list; its first item is the translated
    fragment. Non-list segments, short segments and non-string fragments
    are skipped.

    Args:
        payload: Decoded JSON body.

    Returns:
        Concatenated translation, possibly empty.

    Raises:
        MalformedResponseError: If the payload is not a list of lists.
    """
    if not isinstance(payload, list) or not payload:
        msg = f"Expected a non-empty JSON array, got {type(payload).__name__}"
        raise MalformedResponseError(msg)

    segments = payload[0]
    if not isinstance(segments, list):
        msg = f"Expected segment list at index 0, got {type(segments).__name__}"
        raise MalformedResponseError(msg)

    fragments: list[str] = []
    for segment in segments:
        if not isinstance(segment, list) or len(segment) < MIN_SEGMENT_LENGTH:
            continue
        fragment = segment[0]
        if isinstance(fragment, str):
            fragments.append(fragment)

    return "".join(fragments)
