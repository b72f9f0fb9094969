import logging
from typing import Optional
from time import perf_counter
from ..config import settings
from ..errors import MissingCredentialError
from ..models import Question, Topic
from .difficulty import difficulty_for
from .gemini_client import GeminiHttpTransport, model_resource, raise_for_status
from .prompt_builder import PromptBuilder
from .response_parser import ResponseValidator

logger = logging.getLogger("quiz_challenge")

class GeminiQuestionProvider:
    """Asks the provider for one question. One attempt per call, no retries."""

    def __init__(
        self,
        transport: GeminiHttpTransport,
        validator: Optional[ResponseValidator] = None,
        prompt_builder: Optional[PromptBuilder] = None,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
    ) -> None:
        self.transport = transport
        self.validator = validator or ResponseValidator(strict=settings.strict_question_shape)
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.temperature = temperature if temperature is not None else settings.question_temperature
        self.max_output_tokens = max_output_tokens or settings.question_max_output_tokens

    def _build_body(self, prompt: str) -> dict:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_output_tokens,
            },
        }

    async def request_question(self, topic: Topic, level: int, model_id: str, credential: Optional[str]) -> Question:
        if not credential:
            raise MissingCredentialError()
        difficulty = difficulty_for(level)
        prompt = self.prompt_builder.build(topic=topic, difficulty=difficulty, level=level)
        path = f"{model_resource(model_id)}:generateContent"
        logger.debug({"event": "question_request", "topic": topic.value, "level": level, "difficulty": difficulty.value, "model": model_id})
        t0 = perf_counter()
        reply = await self.transport.send("POST", path, credential=credential, json_body=self._build_body(prompt))
        raise_for_status(reply, "Question provider call failed")
        question = self.validator.parse(reply.decoded())
        logger.debug({
            "event": "question_response",
            "topic": topic.value,
            "level": level,
            "latency_ms": int((perf_counter() - t0) * 1000),
            "text": question.prompt_text,
        })
        return question
