"""HTTP API for the audit."""

import logging

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse

from . import __version__
from .auditor import run_audit
from .config import get_settings
from .errors import AuditError

logger = logging.getLogger(__name__)

router = APIRouter()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


@router.post("/audit")
async def api_audit(request: Request) -> JSONResponse:
    """
    Audit one URL: PageSpeed + HTML + robots.txt + sitemap.xml.

    Body: ``{"url": "example.com"}``. Errors come back as ``{"error": ...}``.
    """
    try:
        payload = await request.json()
    except ValueError:
        return _error(400, "Please provide a valid URL.")

    raw_url = payload.get("url") if isinstance(payload, dict) else None
    logger.info("[api.audit] url=%s", raw_url)

    try:
        result = await run_audit(raw_url, settings=get_settings())
    except AuditError as e:
        logger.info("[api.audit] rejected url=%s status=%d error=%s", raw_url, e.status_code, e.message)
        return _error(e.status_code, e.message)
    except Exception:
        logger.exception("[api.audit] unexpected failure url=%s", raw_url)
        return _error(500, "Something went wrong. Please try again.")

    return JSONResponse(result.to_dict())


app = FastAPI(title="Site Score API", version=__version__)

app.include_router(router, prefix="/api")


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
