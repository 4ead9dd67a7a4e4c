"""FastAPI application exposing the conversion endpoint."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, FastAPI, File, Form, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from anyconvert.core.capabilities import CapabilityRegistry
from anyconvert.core.dispatcher import ConversionDispatcher
from anyconvert.core.encoder import ResultEncoder
from anyconvert.models.config import ServerConfig
from anyconvert.models.request import ConversionRequest
from anyconvert.utils.logging import get_logger

logger = get_logger("server")
router = APIRouter(prefix="/api", tags=["convert"])


def _dispatcher(request: Request) -> ConversionDispatcher:
    return request.app.state.dispatcher


@router.post("/convert")
async def convert_file(
    request: Request,
    file: Optional[UploadFile] = File(None),
    target_format: Optional[str] = Form(None, alias="format"),
) -> JSONResponse:
    """Convert an uploaded file and return it base64 encoded."""
    if file is None or not file.filename:
        return JSONResponse({"error": "No file provided"}, status_code=400)
    if not target_format:
        return JSONResponse({"error": "No target format provided"}, status_code=400)

    conversion = ConversionRequest(
        source_bytes=await file.read(),
        source_filename=file.filename,
        target_format=target_format,
    )

    # Providers block; keep the event loop free for other requests
    outcome = await run_in_threadpool(_dispatcher(request).dispatch, conversion)

    return JSONResponse(
        ResultEncoder.to_envelope(outcome),
        status_code=outcome.http_status,
    )


@router.get("/formats")
async def list_formats(filename: Optional[str] = None) -> dict:
    """Capability table, or the outputs offered for ``filename``."""
    if filename:
        return {
            "filename": filename,
            "category": CapabilityRegistry.category_of(filename).value,
            "outputs": CapabilityRegistry.supported_outputs_for(filename),
        }
    return {
        category.value: {
            "input": sorted(entry.inputs),
            "output": CapabilityRegistry.category_outputs(category),
        }
        for category, entry in CapabilityRegistry.table().items()
    }


def create_app(config: ServerConfig | None = None) -> FastAPI:
    """Build the application; ``config`` defaults to the environment."""
    config = config or ServerConfig.from_env()

    app = FastAPI(title="anyconvert")
    app.state.config = config
    app.state.dispatcher = ConversionDispatcher(config.conversion)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.cors_origin],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health() -> str:
        return "OK"

    app.include_router(router)
    logger.info("Conversion API ready (cors_origin=%s)", config.cors_origin)
    return app


def main() -> None:
    """Run the server with uvicorn on ``PORT``."""
    import uvicorn

    config = ServerConfig.from_env()
    uvicorn.run(create_app(config), host="0.0.0.0", port=config.port)
