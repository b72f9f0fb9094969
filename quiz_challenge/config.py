import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseModel):
    gemini_api_key: str | None = os.getenv("GEMINI_API_KEY")
    gemini_model: str = os.getenv("GEMINI_MODEL", "models/gemini-1.5-flash")
    gemini_api_base: str = os.getenv("GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1")
    request_timeout_s: float = float(os.getenv("REQUEST_TIMEOUT_S", "30"))
    question_temperature: float = float(os.getenv("QUESTION_TEMPERATURE", "0.8"))
    question_max_output_tokens: int = int(os.getenv("QUESTION_MAX_OUTPUT_TOKENS", "500"))
    correct_transition_delay_s: float = float(os.getenv("CORRECT_TRANSITION_DELAY_S", "2.0"))
    incorrect_transition_delay_s: float = float(os.getenv("INCORRECT_TRANSITION_DELAY_S", "2.5"))
    strict_question_shape: bool = os.getenv("STRICT_QUESTION_SHAPE", "true").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "DEBUG")

settings = Settings()
