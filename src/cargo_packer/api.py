"""FastAPI endpoint for the packing core."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from cargo_packer.config import get_settings
from cargo_packer.containers import CONTAINER_PRESETS_M
from cargo_packer.engine import pack
from cargo_packer.errors import ConfigurationError
from cargo_packer.io.export import export_payload, format_summary
from cargo_packer.io.schemas import PackRequest
from cargo_packer.models import PackingOptions
from cargo_packer.packing.heuristics import available_algorithms

logger = logging.getLogger(__name__)

settings = get_settings()

# FastAPI app instance (exactly one)
app = FastAPI(
    title="Cargo Packer API",
    description="3D box placement inside a single container",
)

if settings.cors_origin_regex:
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=settings.cors_origin_regex,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        max_age=3600,
    )


def _missing_information(details: list[Any]) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "error": "MISSING_INFORMATION",
            "summary": "Missing information\nPlease enter the missing details to run the packing.",
            "details": details,
        },
    )


@app.post("/pack")
def pack_endpoint(
    request: dict[str, Any],
    export: int = Query(0, description="Include the JSON export document (1) or not (0)"),
) -> Any:
    """
    Pack boxes into one container.

    Input (request body):
        {
            "container": {"length": 100, "width": 100, "height": 100, "max_weight": 500},
            "boxes": [{"length": 20, "width": 20, "height": 20, "quantity": 3, "weight": 5}],
            "options": {"algorithm": "constrained"}
        }

    Returns:
        {"result": PackingResult, "summary": str} (+ "export" when export=1)
    """
    try:
        body = PackRequest.model_validate(request)
    except ValidationError as e:
        return _missing_information(e.errors(include_url=False, include_context=False))

    missing = body.missing_fields()
    if missing:
        return _missing_information(missing)

    try:
        container = body.resolve_container()
        options = body.options or PackingOptions(algorithm=get_settings().default_algorithm)
        result = pack(container, body.boxes, options)
    except (ConfigurationError, ValueError) as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error(f"ERROR in /pack endpoint: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    response: dict[str, Any] = {
        "result": result.model_dump(mode="json"),
        "summary": format_summary(result),
    }
    if export == 1:
        response["export"] = export_payload(container, body.boxes, result)
    return response


@app.get("/presets")
def presets() -> dict[str, Any]:
    """Container presets in meters."""
    return {"presets": CONTAINER_PRESETS_M}


@app.get("/health")
def health() -> dict[str, Any]:
    """Health check endpoint."""
    return {"ok": True, "algorithms": available_algorithms()}
