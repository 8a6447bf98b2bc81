"""FastAPI server for minifygym."""
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from minifygym import __version__
from minifygym.common import ErrorCode
from minifygym.config import settings, setup_logging
from minifygym.engines import default_registry
from minifygym.errors import MinifyGymError, TrialsFailed
from minifygym.report import results_to_dict
from minifygym.workflow import OptimalMinifyWorkflow

from .models import EnginesResponse, ErrorResponse, MinifyApiRequest, MinifyApiResponse

logger = logging.getLogger("minifygym.api")


def format_timestamp(dt: datetime) -> str:
    return dt.isoformat() + "Z"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging("api")
    logger.info("Starting minifygym API...")

    registry = default_registry()
    app.state.workflow = OptimalMinifyWorkflow(registry=registry)
    logger.info(
        f"Engines ready: minifiers={list(registry.minifier_names())} "
        f"measurements={list(registry.measurement_names())}"
    )

    yield

    logger.info("Shutting down minifygym API...")


app = FastAPI(
    title="minifygym",
    description="Optimal minification service",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests and responses."""
    start_time = time.time()
    logger.info(f"Request: {request.method} {request.url}")

    if request.method == "POST":
        body = await request.body()
        if body:
            logger.info(f"Request body: {len(body)} bytes")

    response = await call_next(request)

    process_time = time.time() - start_time
    logger.info(f"Response: {response.status_code} - {process_time:.4f}s")
    return response


async def get_workflow(request: Request) -> OptimalMinifyWorkflow:
    """Dependency to get the workflow built at startup."""
    workflow = getattr(request.app.state, "workflow", None)
    if workflow is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Workflow not available",
        )
    return workflow


def _error_response(status_code: int, exc: Exception, error_code: ErrorCode, **extra: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=type(exc).__name__,
            message=str(exc),
            error_code=error_code,
            timestamp=format_timestamp(datetime.now()),
            **extra,
        ).model_dump(mode="json", exclude_none=True),
        headers={"X-Error-Code": error_code.value},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors."""
    error_msg = f"Request validation failed: {exc.errors()}"
    logger.error(f"Validation error for {request.url}: {error_msg}")
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            error="RequestValidationError",
            message=error_msg,
            error_code=ErrorCode.VALIDATION_ERROR,
            timestamp=format_timestamp(datetime.now()),
        ).model_dump(mode="json", exclude_none=True),
        headers={"X-Error-Code": ErrorCode.VALIDATION_ERROR.value},
    )


@app.exception_handler(TrialsFailed)
async def trials_failed_handler(request: Request, exc: TrialsFailed):
    logger.warning(f"{len(exc.failures)} trial(s) failed for {request.url}")
    return _error_response(
        422,
        exc,
        exc.error_code,
        failures=[failure.to_dict() for failure in exc.failures],
    )


@app.exception_handler(MinifyGymError)
async def minifygym_exception_handler(request: Request, exc: MinifyGymError):
    logger.warning(f"Rejected request to {request.url}: {exc}")
    return _error_response(status.HTTP_400_BAD_REQUEST, exc, exc.error_code)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}")
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc, ErrorCode.UNKNOWN_ERROR)


@app.get("/", response_model=Dict[str, str])
async def root():
    """Root endpoint."""
    return {
        "name": "minifygym",
        "version": __version__,
        "description": "Optimal minification service",
        "timestamp": format_timestamp(datetime.now()),
    }


@app.get("/engines", response_model=EnginesResponse)
async def list_engines(workflow: OptimalMinifyWorkflow = Depends(get_workflow)):
    return EnginesResponse(
        minifiers=list(workflow.registry.minifier_names()),
        measurements=list(workflow.registry.measurement_names()),
    )


@app.post("/minify", response_model=MinifyApiResponse, response_model_exclude_none=True)
async def minify(
    request: MinifyApiRequest,
    workflow: OptimalMinifyWorkflow = Depends(get_workflow),
):
    """Run every requested trial and return the ranked results."""
    start_time = time.perf_counter()
    results = await workflow.handle_request(request.to_workflow_payload())
    payload = results_to_dict(results, include_code=request.include_code)
    payload["elapsed"] = time.perf_counter() - start_time
    return payload


def serve() -> None:
    setup_logging("api")

    uvicorn.run(
        "minifygym.server.api.server:app",
        host=settings.api_host,
        port=settings.api_port,
        workers=settings.api_workers,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    serve()
