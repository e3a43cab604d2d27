# routers/analyze_tally.py
from fastapi import APIRouter, Request, Response

from core.config import get_api_key
from extraction import run_daily_tally
from extraction.errors import ExtractionError, MissingCredentialError
from extraction.schemas import DailyTallyRequest
from routers.analyze import error_response, read_body, result_response

router = APIRouter()


@router.options("/api/analyze-tally", include_in_schema=False)
def analyze_tally_preflight():
    return Response(status_code=200)


@router.post(
    "/api/analyze-tally",
    summary="Per-shift daily tally report (legacy format)",
    tags=["analyze"],
)
async def analyze_tally(request: Request):
    """
    Older front ends post {type: "text"|"image", content?, imageBase64?, mimeType?}
    and expect the compact per-shift schema (date DD/MM/YYYY, shifts, totals,
    remarks). Same reply shapes as /api/analyze.
    """
    api_key = get_api_key()
    if not api_key:
        return error_response(MissingCredentialError())

    try:
        req = await read_body(request, DailyTallyRequest)
    except ExtractionError as e:
        return error_response(e)

    result = await run_daily_tally(req, api_key=api_key)
    return result_response(result)
