import logging
from typing import List, Optional
from ..config import settings
from ..errors import MissingCredentialError
from .gemini_client import GeminiHttpTransport, raise_for_status

logger = logging.getLogger("quiz_challenge")

class ModelRegistry:
    """Available model ids in provider order, plus the one in use."""

    def __init__(self, transport: GeminiHttpTransport, default_model: Optional[str] = None) -> None:
        self.transport = transport
        self.available: List[str] = []
        self.selected: str = default_model or settings.gemini_model

    def select(self, model_id: str) -> None:
        if not model_id:
            raise ValueError("model id must not be empty")
        self.selected = model_id

    async def list_available_models(self, credential: Optional[str]) -> List[str]:
        if not credential:
            raise MissingCredentialError("Enter an API key before checking the models.")
        reply = await self.transport.send("GET", "models", credential=credential)
        raise_for_status(reply, "Model listing failed")
        data = reply.decoded()
        entries = data.get("models") if isinstance(data, dict) else None
        models: List[str] = []
        if isinstance(entries, list):
            for m in entries:
                if isinstance(m, dict) and isinstance(m.get("name"), str):
                    models.append(m["name"])
        self.available = models
        if models:
            self.selected = models[0]
        logger.debug({"event": "models_listed", "count": len(models), "selected": self.selected})
        return models
