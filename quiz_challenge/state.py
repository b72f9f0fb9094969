import asyncio
import logging
from typing import Any, Callable, Optional
from .config import settings
from .errors import QuizError
from .models import GamePhase, GameStateSnapshot, MAX_LEVEL, Question, QuestionView, Topic
from .services.difficulty import difficulty_for
from .services.model_registry import ModelRegistry
from .services.question_provider import GeminiQuestionProvider

logger = logging.getLogger("quiz_challenge")

Scheduler = Callable[[float, Callable[[], None]], Any]

MSG_CORRECT = "✅ Correct answer!"
MSG_WRONG = "❌ Wrong answer! Back to the previous level."
MSG_WON = f"🎉 YOU WON! You completed all {MAX_LEVEL} levels!"

def loop_scheduler(delay: float, callback: Callable[[], None]) -> Any:
	return asyncio.get_running_loop().call_later(delay, callback)

class GameSession:
	"""One player's level/score/answer state machine.

	Timers scheduled by ``submit_answer`` carry the epoch they were created in;
	``restart`` bumps the epoch so a timer that fires afterwards does nothing.
	The same check discards a question that arrives after a restart.
	"""

	def __init__(
		self,
		provider: GeminiQuestionProvider,
		registry: ModelRegistry,
		credential: Optional[str] = None,
		scheduler: Optional[Scheduler] = None,
		correct_delay: Optional[float] = None,
		incorrect_delay: Optional[float] = None,
	) -> None:
		self.provider = provider
		self.registry = registry
		self.credential = credential
		self.scheduler = scheduler or loop_scheduler
		self.correct_delay = correct_delay if correct_delay is not None else settings.correct_transition_delay_s
		self.incorrect_delay = incorrect_delay if incorrect_delay is not None else settings.incorrect_transition_delay_s
		self.epoch = 0
		self._reset()

	def _reset(self) -> None:
		self.phase = GamePhase.AWAITING_TOPIC_SELECTION
		self.level = 1
		self.score = 0
		self.status_message = ""
		self._clear_round()

	def _clear_round(self) -> None:
		self.current_question: Optional[Question] = None
		self.selected_topic: Optional[Topic] = None
		self.answered = False
		self.selected_index: Optional[int] = None
		self.last_answer_correct: Optional[bool] = None

	def configure(self, credential: str, model_id: Optional[str] = None) -> None:
		self.credential = credential
		if model_id:
			self.registry.select(model_id)
		logger.debug({"event": "session_configured", "has_credential": bool(credential), "model": self.registry.selected})

	def select_model(self, model_id: str) -> None:
		self.registry.select(model_id)

	async def refresh_models(self) -> list:
		self.status_message = ""
		try:
			models = await self.registry.list_available_models(self.credential)
		except QuizError as e:
			self.status_message = f"Error: {e.message}"
			logger.warning({"event": "models_list_failed", "error": e.message})
			return []
		self.status_message = f"Found {len(models)} models." if models else "No models found for this key."
		return models

	async def select_topic(self, topic: Topic | str) -> bool:
		topic = Topic(topic)
		if self.phase != GamePhase.AWAITING_TOPIC_SELECTION:
			logger.debug({"event": "select_topic_ignored", "phase": self.phase.value})
			return False
		epoch = self.epoch
		self.status_message = ""
		self.selected_topic = topic
		self.phase = GamePhase.AWAITING_QUESTION
		try:
			question = await self.provider.request_question(topic, self.level, self.registry.selected, self.credential)
		except QuizError as e:
			if epoch == self.epoch:
				logger.warning({"event": "question_request_failed", "topic": topic.value, "level": self.level, "error": e.message})
				self._abandon_request(e.message)
			return False
		except Exception as e:
			if epoch == self.epoch:
				logger.exception("question_request_crashed")
				self._abandon_request(str(e) or type(e).__name__)
			return False
		if epoch != self.epoch:
			logger.debug({"event": "stale_question_discarded", "epoch": epoch, "current_epoch": self.epoch})
			return False
		self.current_question = question
		self.answered = False
		self.phase = GamePhase.AWAITING_ANSWER
		return True

	def _abandon_request(self, message: str) -> None:
		self.status_message = f"Error: {message}"
		self._clear_round()
		self.phase = GamePhase.AWAITING_TOPIC_SELECTION

	def submit_answer(self, index: int) -> bool:
		if self.phase != GamePhase.AWAITING_ANSWER or self.answered or self.current_question is None:
			logger.debug({"event": "answer_ignored", "phase": self.phase.value, "answered": self.answered})
			return False
		self.answered = True
		self.selected_index = index
		self.phase = GamePhase.SHOWING_OUTCOME
		is_correct = index == self.current_question.correct_index
		self.last_answer_correct = is_correct
		logger.debug({
			"event": "answer_submitted",
			"level": self.level,
			"selected_index": index,
			"correct_index": self.current_question.correct_index,
			"is_correct": is_correct,
		})
		if is_correct:
			self.score += 1
			if self.level == MAX_LEVEL:
				self.status_message = MSG_WON
				self.phase = GamePhase.COMPLETED
				logger.info({"event": "game_completed", "score": self.score})
				return True
			self.status_message = MSG_CORRECT
			self._schedule(self.correct_delay, +1)
		else:
			self.status_message = MSG_WRONG
			self._schedule(self.incorrect_delay, -1)
		return True

	def _schedule(self, delay: float, step: int) -> None:
		epoch = self.epoch
		self.scheduler(delay, lambda: self._apply_transition(epoch, step))

	def _apply_transition(self, epoch: int, step: int) -> None:
		if epoch != self.epoch:
			logger.debug({"event": "stale_transition_skipped", "epoch": epoch, "current_epoch": self.epoch})
			return
		self.status_message = ""
		previous = self.level
		self.level = min(MAX_LEVEL, max(1, self.level + step))
		self._clear_round()
		self.phase = GamePhase.AWAITING_TOPIC_SELECTION
		logger.debug({"event": "level_transition", "from": previous, "to": self.level, "score": self.score})

	def restart(self) -> None:
		self.epoch += 1
		self._reset()
		logger.debug({"event": "session_restarted", "epoch": self.epoch})

	def snapshot(self) -> GameStateSnapshot:
		question = None
		if self.current_question is not None:
			question = QuestionView(
				prompt_text=self.current_question.prompt_text,
				options=list(self.current_question.options),
				correct_index=self.current_question.correct_index if self.answered else None,
			)
		return GameStateSnapshot(
			phase=self.phase,
			level=self.level,
			score=self.score,
			difficulty=difficulty_for(self.level),
			topic=self.selected_topic,
			question=question,
			answered=self.answered,
			selected_index=self.selected_index,
			last_answer_correct=self.last_answer_correct,
			status_message=self.status_message,
			selected_model=self.registry.selected,
			available_models=list(self.registry.available),
			has_credential=bool(self.credential),
		)
