"""FastAPI application serving the combined FASTA export."""

import logging
import os
from typing import Optional

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from fasta_combiner import __version__
from fasta_combiner.core import FastaCombiner, parse_fields, parse_policy
from fasta_combiner.errors import CombineError
from fasta_combiner.fetcher import DEFAULT_TIMEOUT
from fasta_combiner.models import DEFAULT_FIELDS, CombineOptions

logger = logging.getLogger(__name__)

ALLOWED_HEADERS = [
    "X-CSRF-Token",
    "X-Requested-With",
    "Accept",
    "Accept-Version",
    "Content-Length",
    "Content-MD5",
    "Content-Type",
    "Date",
    "X-Api-Version",
]

RESPONSE_HEADERS = {
    "Access-Control-Allow-Credentials": "true",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,OPTIONS",
    "Access-Control-Allow-Headers": ", ".join(ALLOWED_HEADERS),
    "Cross-Origin-Embedder-Policy": "credentialless",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "cross-origin",
}

app = FastAPI(
    title="FASTA Combiner",
    description="Join sequence and metadata JSON exports into FASTA",
    version=__version__,
)


@app.middleware("http")
async def add_cors_headers(request: Request, call_next):
    # Fixed header set on every response, preflights and errors included.
    response = await call_next(request)
    response.headers.update(RESPONSE_HEADERS)
    return response


def _fetch_timeout() -> float:
    return float(os.environ.get("FASTA_COMBINER_TIMEOUT", DEFAULT_TIMEOUT))


@app.get("/health")
def health():
    return {"status": "ok", "version": __version__}


@app.options("/{path:path}")
def preflight(path: str):
    return Response(status_code=200)


@app.get("/api/combine")
def combine(
    sequences_url: Optional[str] = Query(None, alias="sequencesUrl"),
    metadata_url: Optional[str] = Query(None, alias="metadataUrl"),
    fields: str = Query(",".join(DEFAULT_FIELDS)),
    policy: Optional[str] = Query(None),
    filter_field: Optional[str] = Query(None, alias="filterForValidDate"),
):
    try:
        options = CombineOptions(
            fields=parse_fields(fields),
            filter_field=filter_field or None,
            policy=parse_policy(policy),
        )
        # One combiner (and session) per request: nothing is shared between requests.
        result = FastaCombiner(timeout=_fetch_timeout()).combine(
            sequences_url, metadata_url, options
        )
    except CombineError as exc:
        if exc.status_code >= 500:
            logger.error("Combine failed: %s", exc)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
    except Exception as exc:
        logger.exception("Unexpected failure in /api/combine")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to process files", "details": str(exc) or "Unknown error"},
        )
    return PlainTextResponse(result.text, status_code=200)


def main() -> None:  # pragma: no cover - server entry point
    import uvicorn

    log_level = os.environ.get("LOG_LEVEL", "info").lower()
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(levelname)s: %(message)s",
    )
    uvicorn.run(
        app,
        host=os.environ.get("WEB_HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "8000")),
        log_level=log_level,
    )


if __name__ == "__main__":  # pragma: no cover
    main()
