# app_fastapi.py
# -*- coding: utf-8 -*-

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import get_provider
from core.logging import logger
from routers import analyze, analyze_tally, health

# ============================================================
# FastAPI app (Swagger description included)
# ============================================================

app = FastAPI(
    title="Shipping Extraction API",
    description="""
Backend for the port-agency dashboard: turns shipping **emails**, **WhatsApp
messages** and **tally / discharge reports** into structured JSON.

- The front end posts text or a screenshot (base64) with a `parseType`.
- The backend builds a schema-heavy prompt, calls the LLM once and returns
  - `{success: true, parsed}` when the model answered with JSON
  - `{success: true, raw, parsed: null, message}` when it answered with prose
  - `{error, details?}` with a non-2xx status on failure
""",
    version="1.0.0",
)

# CORS: the static front end is served from another origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


# ============================================================
# Error shape: every error body is {error, details?}
# ============================================================

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": "Server error", "details": str(exc)},
    )


# ============================================================
# Routers
# ============================================================

app.include_router(health.router)
app.include_router(analyze.router)
app.include_router(analyze_tally.router)

logger.info(f"Shipping extraction API ready (provider={get_provider()})")

# ============================================================
# uvicorn entry point
# ============================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app_fastapi:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
