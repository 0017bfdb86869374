import logging
import time
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from smartdefine.application.config import AppConfig, resolve_config
from smartdefine.application.factory import get_word_store
from smartdefine.application.scheduling import SchedulingService
from smartdefine.application.stats import StatsAggregator
from smartdefine.consts import VERSION
from smartdefine.domain.constants import DEFAULT_REVIEW_LIMIT, ReviewType
from smartdefine.domain.errors import InvalidWordError, WordNotFoundError
from smartdefine.domain.models import ReviewOutcome
from smartdefine.domain.ports import WordStore
from smartdefine.infrastructure.adapters import MemoryWordStore
from smartdefine.infrastructure.codec import due_word_to_dict, record_to_dict

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("smartdefine.server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"SmartDefine Server v{VERSION} starting up...")
    yield
    # Shutdown
    logger.info("SmartDefine Server shutting down...")


app = FastAPI(
    title="SmartDefine Server",
    description="Review scheduling API for the SmartDefine browser extension.",
    version=VERSION,
    lifespan=lifespan,
)

start_time = time.time()


def get_config() -> AppConfig:
    return resolve_config()


def get_store(config: AppConfig = Depends(get_config)) -> WordStore:
    # The memory backend shares one store across requests for the life of the app
    if config.store_backend == "memory":
        if getattr(app.state, "memory_store", None) is None:
            app.state.memory_store = MemoryWordStore()
        return app.state.memory_store
    return get_word_store(config)


def get_service(
    config: AppConfig = Depends(get_config), store: WordStore = Depends(get_store)
) -> SchedulingService:
    return SchedulingService(
        store,
        aggregator=StatsAggregator(treat_missing_as_new=config.treat_missing_as_new),
    )


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


class AddWordRequest(BaseModel):
    word: str
    category: str = "General"
    explanation: str = ""
    notes: str | None = None
    context: str | None = None


class ReviewRequest(BaseModel):
    word: str
    category: str = "General"
    is_correct: bool = Field(alias="isCorrect")
    # Range checks live here; the engine does not validate them.
    response_time: float = Field(default=5000, ge=0, alias="responseTime")
    confidence_level: float = Field(default=0.5, ge=0.0, le=1.0, alias="confidenceLevel")


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/version")
async def get_version():
    return {"version": VERSION}


@app.get("/due")
async def get_due(
    review_type: ReviewType = Query(default=ReviewType.ALL, alias="reviewType"),
    limit: int = DEFAULT_REVIEW_LIMIT,
    service: SchedulingService = Depends(get_service),
) -> dict[str, Any]:
    items = await service.get_due(review_type, limit)
    return {"success": True, "words": [due_word_to_dict(item) for item in items]}


@app.get("/stats")
async def get_stats(service: SchedulingService = Depends(get_service)) -> dict[str, Any]:
    stats = await service.get_stats()
    return {"success": True, "stats": stats.to_dict()}


@app.get("/recommendations")
async def get_recommendations(
    config: AppConfig = Depends(get_config),
    service: SchedulingService = Depends(get_service),
) -> dict[str, Any]:
    items = await service.get_recommendations(config.learning)
    return {
        "success": True,
        "recommendations": [
            {k: v for k, v in vars(item).items() if v is not None} for item in items
        ],
    }


@app.post("/words")
async def add_word(
    req: AddWordRequest, service: SchedulingService = Depends(get_service)
) -> dict[str, Any]:
    try:
        record = await service.add_word(
            req.word, req.category, req.explanation, notes=req.notes, context=req.context
        )
    except InvalidWordError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {"success": True, "wordData": record_to_dict(record)}


@app.post("/review")
async def process_review(
    req: ReviewRequest, service: SchedulingService = Depends(get_service)
) -> dict[str, Any]:
    outcome = ReviewOutcome(
        is_correct=req.is_correct,
        response_time_ms=req.response_time,
        confidence_level=req.confidence_level,
    )
    try:
        record = await service.review_word(req.category, req.word, outcome)
    except WordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    logger.info(f"Review via API: {req.word} correct={req.is_correct}")
    return {"success": True, "wordData": record_to_dict(record)}


@app.delete("/words/{category}/{word}")
async def delete_word(
    category: str, word: str, service: SchedulingService = Depends(get_service)
) -> dict[str, Any]:
    try:
        await service.delete_word(category, word)
    except WordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"success": True}
