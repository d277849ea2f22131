"""Translate router — proxies solution text to LibreTranslate.

POST takes a JSON body ``{text, source?, target?}``; GET takes the same
fields as query parameters. Fields that are not strings count as missing.
"""

import logging
from json import JSONDecodeError
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from integralforme.api.deps import get_translator
from integralforme.shared.errors import (
    TranslationValidationError,
    UpstreamHTTPError,
    UpstreamProtocolError,
    UpstreamTransportError,
)
from integralforme.shared.models.puzzle import TranslateResponse
from integralforme.shared.services.translator import TranslationProxy

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/translate", tags=["Translate"])


def _string_field(payload: Any, name: str) -> Optional[str]:
    if isinstance(payload, dict):
        value = payload.get(name)
        if isinstance(value, str):
            return value
    return None


async def _read_fields(request: Request) -> dict:
    if request.method == "GET":
        return dict(request.query_params)
    try:
        body = await request.json()
    except (JSONDecodeError, UnicodeDecodeError):
        return {}
    return body if isinstance(body, dict) else {}


@router.api_route("", methods=["GET", "POST"], response_model=TranslateResponse)
async def translate(
    request: Request,
    translator: TranslationProxy = Depends(get_translator),
):
    """Translate text, keeping every LaTeX math span byte-for-byte."""
    fields = await _read_fields(request)

    try:
        translated = await run_in_threadpool(
            translator.translate,
            _string_field(fields, "text"),
            _string_field(fields, "source"),
            _string_field(fields, "target"),
        )
    except TranslationValidationError as exc:
        return JSONResponse(status_code=400, content={"error": exc.message})
    except UpstreamHTTPError as exc:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.body or "Translate failed"},
        )
    except UpstreamProtocolError:
        return JSONResponse(status_code=502, content={"error": "Invalid translate response"})
    except UpstreamTransportError:
        return JSONResponse(status_code=502, content={"error": "Translation service unreachable"})

    return TranslateResponse(translated_text=translated).model_dump(by_alias=True)
