import logging
from pathlib import Path
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from app.config import settings
from app.errors import NotFound, StatsError
from app.logging_config import setup_logging
from app.schemas import GenerateResponse, ParameterSet, StatsResponse
from app.sequence import generate
from app.state import open_store
from app.tracker import FrequencyTracker
from app.utils import pretty_json, summarize

setup_logging(settings.log_level, settings.log_file)
logger = logging.getLogger("fizzbuzz")

app = FastAPI(title=settings.project_name, version=settings.api_version)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info("Received request: %s %s", request.method, request.url.path)
    response = await call_next(request)
    logger.info("Completed %s %s with %s", request.method, request.url.path, response.status_code)
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "error": "Invalid request body",
            "detail": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
    )


@app.exception_handler(StatsError)
async def stats_exception_handler(request: Request, exc: StatsError):
    if not isinstance(exc, NotFound):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc)},
    )


def open_tracker() -> FrequencyTracker:
    return FrequencyTracker(
        open_store(settings),
        namespace=settings.stats_namespace,
        page_size=settings.scan_page_size,
    )


@app.post("/api/generate", response_model=GenerateResponse)
@app.post("/api/fizzbuzz", response_model=GenerateResponse, include_in_schema=False)
def generate_sequence(params: ParameterSet) -> GenerateResponse:
    # A store that cannot be opened fails the request before generation.
    tracker = open_tracker()
    result = generate(params.divisor1, params.divisor2, params.limit, params.label1, params.label2)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Generated %s", summarize(result))
    tracker.record_hit(params)
    return GenerateResponse(result=result)


@app.get("/api/stats", response_model=StatsResponse)
def stats() -> StatsResponse:
    params, hits = open_tracker().most_frequent()
    return StatsResponse(most_frequent_request=params, hits=hits)


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}


@app.get("/", response_class=HTMLResponse)
def index(request: Request):
    counts = open_tracker().all_counts()
    items: List[Dict[str, Any]] = [
        {
            "hits": hits,
            "json_pretty": pretty_json(params.model_dump()),
        }
        for params, hits in counts
    ]
    return templates.TemplateResponse(request, "index.html", {"items": items})


if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.host, port=settings.port, reload=False)
