# ============================================================
# Travel Lebanon Chatbot API
# ------------------------------------------------------------
# Read-only RAG service wiring:
#   - Directus collections as the only data source
#   - Prompt assembly with full/compact modes + size guard
#   - Gemini, OpenAI, Ollama, or Echo model clients
# ============================================================

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from functools import lru_cache
from typing import AsyncIterator, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

# --- Local imports ---
from travelbot.settings import Settings, get_settings
from travelbot.search import DataAggregator, DirectusFetcher, build_directus_client
from travelbot.generate import ChatGenerator, EchoDevClient, LLMError, ProviderErrorKind
from travelbot.orchestrator import ChatOrchestrator, InvalidQuestionError

logger = logging.getLogger(__name__)

INVALID_QUESTION_MESSAGE = 'Please provide a valid "question" in the request body'

# kind -> (status, error, message)
LLM_ERROR_RESPONSES = {
    ProviderErrorKind.AUTH_CONFIG: (
        500,
        "Configuration error",
        "There is an issue with the AI service configuration. Please try again later.",
    ),
    ProviderErrorKind.RATE_LIMITED: (
        429,
        "Rate limit exceeded",
        "Too many requests. Please try again in a moment.",
    ),
    ProviderErrorKind.OTHER: (
        500,
        "Internal server error",
        "An unexpected error occurred. Please try again later.",
    ),
}


# ------------------------------------------------------------
# 🔧 Model client selection
# ------------------------------------------------------------
def build_model_client(settings: Settings):
    provider = settings.LLM_PROVIDER
    if provider == "gemini":
        from travelbot.generate.clients.gemini_client import GeminiClient
        return GeminiClient(api_key=settings.GEMINI_API_KEY, model=settings.GEMINI_MODEL)
    if provider == "openai":
        from travelbot.generate.clients.openai_client import OpenAIClient
        return OpenAIClient(api_key=settings.OPENAI_API_KEY, model=settings.OPENAI_MODEL)
    if provider == "ollama":
        from travelbot.generate.clients.ollama_client import OllamaClient
        return OllamaClient(host=settings.OLLAMA_HOST, model=settings.OLLAMA_MODEL)
    return EchoDevClient()


@lru_cache(maxsize=1)
def get_generator() -> ChatGenerator:
    settings = get_settings()
    client = build_model_client(settings)
    logger.info("LLM provider: %s (%s)", settings.LLM_PROVIDER, getattr(client, "model", None))
    return ChatGenerator(model_client=client, config_path=settings.GENERATE_CONFIG_PATH)


async def get_aggregator(settings: Settings = Depends(get_settings)) -> AsyncIterator[DataAggregator]:
    """Per-request Directus client, closed once the response is sent."""
    async with build_directus_client(
        settings.DIRECTUS_URL or "",
        settings.DIRECTUS_TOKEN or "",
        timeout=settings.DIRECTUS_TIMEOUT,
    ) as http:
        yield DataAggregator(
            DirectusFetcher(http, page_limit=settings.DIRECTUS_PAGE_LIMIT),
            settings.collections,
            include_unfiltered_context=settings.INCLUDE_UNFILTERED_CONTEXT,
        )


def get_orchestrator(
    settings: Settings = Depends(get_settings),
    aggregator: DataAggregator = Depends(get_aggregator),
    generator: ChatGenerator = Depends(get_generator),
) -> ChatOrchestrator:
    return ChatOrchestrator(aggregator, generator, max_prompt_tokens=settings.MAX_PROMPT_TOKENS)


# ------------------------------------------------------------
# 🚀 FastAPI init
# ------------------------------------------------------------
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging() -> None:
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)


def check_required_settings(settings: Settings) -> None:
    """Exit the process when a boot-time variable is missing."""
    missing = settings.missing_required()
    for name in missing:
        logger.error("Missing required environment variable: %s", name)
    if missing:
        raise SystemExit(1)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    settings = get_settings()
    check_required_settings(settings)
    logger.info("%s started (%s)", settings.APP_NAME, settings.ENV)
    logger.info("  POST /chatbot        - Main chatbot endpoint")
    logger.info("  GET  /health         - Health check")
    logger.info("  GET  /debug/directus - Directus connection test (dev only)")
    yield


app = FastAPI(title="Travel Lebanon Chatbot API", version="1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins_list,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info("%s %s", request.method, request.url.path)
    return await call_next(request)


# ------------------------------------------------------------
# 📦 Pydantic models
# ------------------------------------------------------------
class ChatbotRequest(BaseModel):
    question: Optional[str] = None


class ChatbotResponse(BaseModel):
    answer: str


class HealthResponse(BaseModel):
    status: str
    service: str
    timestamp: str


# ------------------------------------------------------------
# ⚠️ Error handlers
# ------------------------------------------------------------
def _invalid_request() -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "message": INVALID_QUESTION_MESSAGE},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return _invalid_request()


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # a wrong method on a known path is reported as an unknown endpoint
    if exc.status_code in (404, 405):
        return JSONResponse(
            status_code=404,
            content={
                "error": "Not found",
                "message": f"Endpoint {request.method} {request.url.path} does not exist",
            },
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("[Server] Unhandled error: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "message": "An unexpected error occurred"},
    )


# ------------------------------------------------------------
# 💬 Main chatbot route
# ------------------------------------------------------------
@app.post("/chatbot", response_model=ChatbotResponse)
async def chatbot(req: ChatbotRequest, orchestrator: ChatOrchestrator = Depends(get_orchestrator)):
    try:
        result = await orchestrator.answer(req.question)
    except InvalidQuestionError:
        return _invalid_request()
    except LLMError as e:
        logger.error("[Chatbot] Model error (%s): %s", e.kind.value, e)
        status, error, message = LLM_ERROR_RESPONSES[e.kind]
        return JSONResponse(status_code=status, content={"error": error, "message": message})
    except Exception:
        logger.exception("[Chatbot] Error processing request")
        status, error, message = LLM_ERROR_RESPONSES[ProviderErrorKind.OTHER]
        return JSONResponse(status_code=status, content={"error": error, "message": message})
    return ChatbotResponse(answer=result.answer)


# ------------------------------------------------------------
# 🧭 Health + debug
# ------------------------------------------------------------
@app.get("/health", response_model=HealthResponse)
def health(settings: Settings = Depends(get_settings)):
    return HealthResponse(
        status="healthy",
        service=settings.APP_NAME,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@app.get("/debug/directus")
async def debug_directus(
    settings: Settings = Depends(get_settings),
    aggregator: DataAggregator = Depends(get_aggregator),
):
    if settings.is_production:
        return JSONResponse(status_code=404, content={"error": "Not found"})

    try:
        sample = await aggregator.get_directus_data_compact("")
    except Exception as e:
        return JSONResponse(status_code=500, content={"status": "error", "message": str(e)})
    return {
        "status": "connected",
        "directusUrl": settings.DIRECTUS_URL,
        "configuredCollections": settings.collections,
        "sampleData": sample,
    }
