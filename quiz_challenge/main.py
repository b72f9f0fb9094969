from fastapi import FastAPI, Request
from fastapi.responses import ORJSONResponse
from fastapi.middleware.cors import CORSMiddleware
import logging
from time import perf_counter
from typing import List
from .config import settings
from .models import GameStateSnapshot, SelectModelRequest, SelectTopicRequest, StartGameRequest, SubmitAnswerRequest, Topic, TopicInfo
from .services.gemini_client import GeminiHttpTransport
from .services.model_registry import ModelRegistry
from .services.question_provider import GeminiQuestionProvider
from .state import GameSession

logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s %(message)s")
logger = logging.getLogger("quiz_challenge")

app = FastAPI(default_response_class=ORJSONResponse)

app.add_middleware(
	CORSMiddleware,
	allow_origins=["*"],
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)

transport = GeminiHttpTransport()
session = GameSession(
	provider=GeminiQuestionProvider(transport),
	registry=ModelRegistry(transport),
	credential=settings.gemini_api_key,
)

@app.on_event("startup")
def on_startup() -> None:
	logger.info({
		"event": "api_startup",
		"model": settings.gemini_model,
		"api_base": settings.gemini_api_base,
		"has_env_credential": bool(settings.gemini_api_key),
	})

@app.on_event("shutdown")
async def on_shutdown() -> None:
	await transport.close()

@app.middleware("http")
async def timing_middleware(request: Request, call_next):
	start = perf_counter()
	response = await call_next(request)
	duration_ms = int((perf_counter() - start) * 1000)
	logger.debug({
		"event": "request_timing",
		"method": request.method,
		"path": request.url.path,
		"status_code": response.status_code,
		"duration_ms": duration_ms,
	})
	return response

@app.get("/api/topics", response_model=List[TopicInfo])
def list_topics():
	return [TopicInfo(id=t, name=t.display_name) for t in Topic]

# session endpoints are async so state only changes on the event loop thread, alongside the outcome timers
@app.get("/api/game/state", response_model=GameStateSnapshot)
async def get_state():
	return session.snapshot()

@app.post("/api/game/start", response_model=GameStateSnapshot)
async def start_game(payload: StartGameRequest):
	session.configure(payload.api_key, payload.model)
	return session.snapshot()

@app.post("/api/game/topic", response_model=GameStateSnapshot)
async def select_topic(payload: SelectTopicRequest):
	await session.select_topic(payload.topic)
	return session.snapshot()

@app.post("/api/game/answer", response_model=GameStateSnapshot)
async def submit_answer(payload: SubmitAnswerRequest):
	session.submit_answer(payload.index)
	return session.snapshot()

@app.post("/api/game/restart", response_model=GameStateSnapshot)
async def restart_game():
	session.restart()
	return session.snapshot()

@app.post("/api/models/refresh", response_model=GameStateSnapshot)
async def refresh_models():
	await session.refresh_models()
	return session.snapshot()

@app.post("/api/models/select", response_model=GameStateSnapshot)
async def select_model(payload: SelectModelRequest):
	session.select_model(payload.model)
	return session.snapshot()
