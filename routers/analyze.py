# routers/analyze.py
from typing import Any, Type, TypeVar

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from core.config import get_api_key
from extraction import run_extraction
from extraction.errors import ExtractionError, MalformedRequestError, MissingCredentialError
from extraction.extraction_engine import failure_from_error
from extraction.schemas import AnalyzeRequest, ExtractionResult

router = APIRouter()

BodyT = TypeVar("BodyT", bound=BaseModel)


def result_response(result: ExtractionResult) -> JSONResponse:
    status_code, body = result.to_response()
    return JSONResponse(status_code=status_code, content=body)


def error_response(err: ExtractionError) -> JSONResponse:
    return result_response(failure_from_error(err))


async def read_body(request: Request, model: Type[BodyT]) -> BodyT:
    """
    Parse the JSON body into `model`.
    An empty body counts as {} so it fails on missing content, not on syntax.
    """
    raw = await request.body()
    if not raw.strip():
        data: Any = {}
    else:
        try:
            data = await request.json()
        except ValueError as e:
            raise MalformedRequestError(details=f"Body is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedRequestError(details="Body must be a JSON object")

    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise MalformedRequestError(details=_short_errors(e)) from e


def _short_errors(e: ValidationError) -> str:
    parts = []
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


@router.options("/api/analyze", include_in_schema=False)
def analyze_preflight():
    return Response(status_code=200)


@router.post(
    "/api/analyze",
    summary="Analyze a shipping email / message / tally report",
    tags=["analyze"],
    responses={
        400: {"description": "Invalid parseType, missing content or malformed body"},
        500: {"description": "API key not configured or server error"},
    },
)
async def analyze(request: Request):
    """
    - parseType email | message : vessel, dates, ports, status, cargo, services, contacts
    - parseType tally           : cargo declared/discharged/remaining, shifts, totals, remarks
    - text in `content`, or an image in `imageBase64` (+ `mimeType`)

    Reply:
    - {success: true, parsed: {...}}                       model returned JSON
    - {success: true, raw: "...", parsed: null, message}   model returned prose
    - {error, details?}                                    failure, non-2xx status
    """
    # credential first: a misconfigured server answers 500 whatever the body
    api_key = get_api_key()
    if not api_key:
        return error_response(MissingCredentialError())

    try:
        req = await read_body(request, AnalyzeRequest)
    except ExtractionError as e:
        return error_response(e)

    result = await run_extraction(req, api_key=api_key)
    return result_response(result)

