from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

MAX_LEVEL = 20

class Topic(str, Enum):
    MATH = "math"
    GEOGRAPHY = "geography"
    HISTORY = "history"
    GENERAL_CULTURE = "general-culture"

    @property
    def display_name(self) -> str:
        return TOPIC_NAMES[self]

TOPIC_NAMES = {
    Topic.MATH: "Mathematics",
    Topic.GEOGRAPHY: "Geography",
    Topic.HISTORY: "History",
    Topic.GENERAL_CULTURE: "General Culture",
}

class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    VERY_HARD = "very-hard"

class GamePhase(str, Enum):
    AWAITING_TOPIC_SELECTION = "awaiting_topic_selection"
    AWAITING_QUESTION = "awaiting_question"
    AWAITING_ANSWER = "awaiting_answer"
    SHOWING_OUTCOME = "showing_outcome"
    COMPLETED = "completed"

class Question(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    prompt_text: str = Field(alias="promptText")
    options: List[str]
    correct_index: int = Field(alias="correctIndex")

class QuestionView(BaseModel):
    prompt_text: str
    options: List[str]
    correct_index: Optional[int] = None

class TopicInfo(BaseModel):
    id: Topic
    name: str

class GameStateSnapshot(BaseModel):
    phase: GamePhase
    level: int
    max_level: int = MAX_LEVEL
    score: int
    difficulty: Difficulty
    topic: Optional[Topic] = None
    question: Optional[QuestionView] = None
    answered: bool = False
    selected_index: Optional[int] = None
    last_answer_correct: Optional[bool] = None
    status_message: str = ""
    selected_model: str
    available_models: List[str] = []
    has_credential: bool = False

class StartGameRequest(BaseModel):
    api_key: str
    model: Optional[str] = None

class SelectTopicRequest(BaseModel):
    topic: Topic

class SubmitAnswerRequest(BaseModel):
    index: int

class SelectModelRequest(BaseModel):
    model: str = Field(min_length=1)
