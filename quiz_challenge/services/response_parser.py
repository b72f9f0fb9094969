import json
import re
import logging
from typing import Any, Callable, List, Optional
from ..errors import MalformedJsonError, ProviderResponseShapeError, SchemaValidationError
from ..models import Question

logger = logging.getLogger("quiz_challenge")

OPTION_COUNT = 4

_FENCE_JSON = re.compile(r"```json\n?")
_FENCE_BARE = re.compile(r"```\n?")


def _dig(obj: Any, *path: Any) -> Any:
    for key in path:
        if isinstance(key, int):
            if not isinstance(obj, list) or len(obj) <= key:
                return None
        elif not isinstance(obj, dict):
            return None
        obj = obj[key] if isinstance(key, int) else obj.get(key)
    return obj


def _from_plain_text(raw: Any) -> Optional[str]:
    return raw if isinstance(raw, str) else None


def _from_legacy_candidates(raw: Any) -> Optional[str]:
    return _dig(raw, "candidates", 0, "content", 0, "parts", 0, "text")


def _from_candidates(raw: Any) -> Optional[str]:
    return _dig(raw, "candidates", 0, "content", "parts", 0, "text")


def _from_output_content(raw: Any) -> Optional[str]:
    content = _dig(raw, "output", 0, "content")
    if not isinstance(content, list):
        return None
    for item in content:
        if isinstance(item, dict) and item.get("type") == "text":
            return item.get("text")
    return None


def _from_top_level_text(raw: Any) -> Optional[str]:
    return _dig(raw, "text")


def _from_outputs(raw: Any) -> Optional[str]:
    return _dig(raw, "outputs", 0, "content", 0, "text")


# Tried in order, first non-empty string wins.
TEXT_EXTRACTORS: List[Callable[[Any], Optional[str]]] = [
    _from_plain_text,
    _from_legacy_candidates,
    _from_candidates,
    _from_output_content,
    _from_top_level_text,
    _from_outputs,
]


class ResponseValidator:
    """Turns a raw provider reply into a Question, or raises a QuizError subclass.

    With ``strict`` on, a question must also have a non-blank prompt, exactly
    four options and a correct index pointing at one of them.
    """

    def __init__(self, strict: bool = True) -> None:
        self.strict = strict

    def parse(self, raw_reply: Any) -> Question:
        text = self.extract_text(raw_reply)
        cleaned = self._strip_code_fences(text)
        payload = self._load_json(cleaned)
        return self._validate(payload)

    def extract_text(self, raw_reply: Any) -> str:
        for extractor in TEXT_EXTRACTORS:
            value = extractor(raw_reply)
            if isinstance(value, str) and value.strip():
                return value
        raise ProviderResponseShapeError(raw_reply)

    def _strip_code_fences(self, text: str) -> str:
        t = _FENCE_JSON.sub("", text)
        t = _FENCE_BARE.sub("", t)
        return t.strip()

    def _try_slice_to_object(self, text: str) -> Any:
        first = text.find("{")
        last = text.rfind("}")
        if first == -1 or last <= first:
            return None
        try:
            return json.loads(text[first:last + 1])
        except (ValueError, RecursionError):
            return None

    def _load_json(self, cleaned: str) -> Any:
        try:
            return json.loads(cleaned)
        except (ValueError, RecursionError) as e:
            sliced = self._try_slice_to_object(cleaned)
            if sliced is not None:
                logger.debug({"event": "response_json_sliced", "preview": cleaned[:200]})
                return sliced
            raise MalformedJsonError(str(e), cleaned) from e

    def _validate(self, payload: Any) -> Question:
        if not isinstance(payload, dict):
            raise SchemaValidationError(payload, "expected a JSON object")
        prompt = _first_present(payload, "promptText", "prompt_text", "question")
        options = _first_present(payload, "options", "answers")
        index = _first_present(payload, "correctIndex", "correct_index")
        if not isinstance(prompt, str):
            raise SchemaValidationError(payload, "missing question text")
        if not isinstance(options, list) or not all(isinstance(o, str) for o in options):
            raise SchemaValidationError(payload, "options must be a list of strings")
        index = _as_index(index)
        if index is None:
            raise SchemaValidationError(payload, "missing numeric correct index")
        if self.strict:
            if not prompt.strip():
                raise SchemaValidationError(payload, "empty question text")
            if len(options) != OPTION_COUNT:
                raise SchemaValidationError(payload, f"expected {OPTION_COUNT} options, got {len(options)}")
            if not 0 <= index < len(options):
                raise SchemaValidationError(payload, f"correct index {index} out of range")
        return Question(prompt_text=prompt, options=options, correct_index=index)


def _first_present(payload: dict, *keys: str) -> Any:
    for key in keys:
        if key in payload:
            return payload[key]
    return None


def _as_index(value: Any) -> Optional[int]:
    # bool is an int subclass; true/false is not an index
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None
