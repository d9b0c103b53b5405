"""
Travel Service -- HTTP surface of the travel companion.

Routes (prefix /api/travel):
  POST   /itinerary                      -- personalised day-by-day itinerary
  GET    /cultural-insights/{destination} -- structured cultural briefing
  POST   /translate                      -- culturally adapted translation
  POST   /chat                           -- multi-turn conversation
  GET    /performance                    -- backend call metrics
  DELETE /cache                          -- drop cached responses
  DELETE /sessions/{session_id}          -- forget one conversation
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse

from companion.errors import ErrorKind, GenerationError, ValidationError
from companion.llm_adapter import LLMProvider, build_llm_provider
from companion.logging.logger import setup_logging
from companion.observability.metrics import metrics_response
from services.travel_service.config import TravelConfig
from services.travel_service.orchestrator import TravelOrchestrator, build_orchestrator
from services.travel_service.parsers import TranslationResult
from services.travel_service.schemas import ChatBody, ItineraryBody, TranslateBody

SERVICE_NAME = "travel_service"
cfg: TravelConfig | None = None
provider: LLMProvider | None = None
orchestrator: TravelOrchestrator | None = None

_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.RATE_LIMIT: 429,
    ErrorKind.NETWORK: 504,
}


@asynccontextmanager
async def lifespan(application: FastAPI):
    global cfg, provider, orchestrator
    cfg = TravelConfig.from_env()
    logger = setup_logging(SERVICE_NAME, cfg.log_level)

    provider = build_llm_provider(cfg.llm_provider)
    orchestrator = build_orchestrator(cfg, provider)
    logger.info(
        "Travel Service ready (model=%s, fallback=%s)", cfg.model, cfg.fallback_model
    )
    yield

    logger.info("Shutting down")
    if provider:
        await provider.aclose()


app = FastAPI(
    title="Travel Companion - Travel Service",
    version="0.1.0",
    description="Itineraries, cultural insights and translation backed by an LLM",
    lifespan=lifespan,
)
router = APIRouter(prefix="/api/travel")
logger = logging.getLogger(SERVICE_NAME)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@app.exception_handler(ValidationError)
async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "details": str(exc)},
    )


@app.exception_handler(GenerationError)
async def _generation_error(request: Request, exc: GenerationError) -> JSONResponse:
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=_STATUS_BY_KIND.get(exc.kind, 502),
        content={"error": "Generation failed", "message": exc.user_message},
    )


@app.get("/health")
async def health():
    return {"status": "ok", "service": SERVICE_NAME}


@app.get("/metrics")
async def metrics():
    return metrics_response()


@router.post("/itinerary")
async def generate_itinerary(body: ItineraryBody):
    itinerary = await orchestrator.itinerary(body.destination, body.merged_profile())
    return {
        "destination": body.destination,
        "itinerary": itinerary,
        "generatedAt": _now(),
    }


@router.get("/cultural-insights/{destination}")
async def cultural_insights(destination: str):
    insights = await orchestrator.insights(destination)
    return {
        "destination": destination,
        "insights": insights,
        "retrievedAt": _now(),
    }


@router.post("/translate")
async def translate(body: TranslateBody):
    result = await orchestrator.translate(body.text, body.source_lang, body.target_lang)
    response = {
        "originalText": body.text,
        "sourceLang": body.source_lang,
        "targetLang": body.target_lang,
        "translatedAt": _now(),
    }
    if isinstance(result, TranslationResult):
        response["translatedText"] = result.translation
        response["translationNotes"] = result.notes
        response["culturalAdaptations"] = result.cultural_adaptations
    else:
        response["translatedText"] = result
    return response


@router.post("/chat")
async def chat(body: ChatBody):
    reply = await orchestrator.converse(body.session_id, body.message)
    return {
        "sessionId": reply.session_id,
        "response": reply.response,
        "conversationLength": reply.conversation_length,
    }


@router.get("/performance")
async def performance():
    snapshot = orchestrator.metrics()
    return {
        "totalCalls": snapshot.total_calls,
        "successfulCalls": snapshot.successful_calls,
        "failedCalls": snapshot.failed_calls,
        "averageResponseTime": snapshot.average_response_time,
        "successRate": snapshot.success_rate,
    }


@router.delete("/cache")
async def clear_cache():
    orchestrator.reset_cache()
    return {"status": "cleared"}


@router.delete("/sessions/{session_id}")
async def forget_session(session_id: str):
    removed = orchestrator.forget_session(session_id)
    if not removed:
        return JSONResponse(
            status_code=404,
            content={"error": "Unknown session", "sessionId": session_id},
        )
    return {"status": "forgotten", "sessionId": session_id}


app.include_router(router)
