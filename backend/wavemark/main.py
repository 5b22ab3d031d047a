import logging
from typing import Any, Dict

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from . import assessment_routes, marking_routes, submission_routes
from .config import Settings, get_settings
from .db.session import init_db
from .errors import MarkingError, ParseError
from .logging_config import configure_logging


configure_logging()
logger = logging.getLogger(__name__)
app = FastAPI(title="Wavemark Assessment Backend", version="0.1.0")

settings_snapshot = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings_snapshot.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
logger.info("Vision marking configured: %s", settings_snapshot.vision_configured)
logger.info("Marking model: %s", settings_snapshot.marking_model)

app.include_router(assessment_routes.router)
app.include_router(submission_routes.router)
app.include_router(marking_routes.router)


@app.exception_handler(MarkingError)
async def marking_error_handler(request: Request, exc: MarkingError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    body: Dict[str, Any] = {"error": exc.message}
    if isinstance(exc, ParseError) and exc.raw_response is not None:
        body["rawResponse"] = exc.raw_response
    return JSONResponse(body, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())[1:])
        problems.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return JSONResponse({"error": "; ".join(problems) or "Invalid request"}, status_code=400)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s failed", request.method, request.url.path)
    return JSONResponse({"error": str(exc) or "Failed to process request"}, status_code=500)


@app.on_event("startup")
def initialise_database() -> None:
    init_db()


@app.get("/healthz")
def health(settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    return {"status": "ok", "vision_configured": settings.vision_configured}
