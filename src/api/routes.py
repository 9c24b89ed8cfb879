"""Batch translation endpoint."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from src.features.translation.engine import BatchTranslationEngine
from src.features.translation.errors import (
    DirectiveValidationError,
    TranslationFailure,
)
from src.features.translation.models import TranslateRequest


logger = structlog.get_logger()

router = APIRouter()


def get_engine(request: Request) -> BatchTranslationEngine:
    """Return the engine created at application setup."""
    engine: BatchTranslationEngine = request.app.state.engine
    return engine


@router.post("/translate")
def translate(
    body: TranslateRequest,
    engine: Annotated[BatchTranslationEngine, Depends(get_engine)],
) -> JSONResponse:
    """Translate the selected fields of every item.

    Returns the transformed items. A directive without ``newKey`` is
    rejected with 400 before any translation call; failed translation
    calls yield 502 with the failed units and the partially translated
    items.
    """
    log = logger.bind(component="api", route="translate")

    try:
        result = engine.translate_batch(
            body.items, body.keys_to_translate, body.source_lang
        )
    except DirectiveValidationError as exc:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "newKey is required.", "directive_index": exc.index},
        )
    except TranslationFailure as exc:
        log.error("translate_request_failed", failed=len(exc.failures))
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={
                "error": "Translation failed.",
                "failures": [f.to_dict() for f in exc.failures],
            },
        )

    if not result.success:
        log.error("translate_request_partial", failed=len(result.failures))
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={
                "error": "Translation failed.",
                "failures": [f.to_dict() for f in result.failures],
                "items": result.records,
            },
        )

    return JSONResponse(status_code=status.HTTP_200_OK, content=result.records)
