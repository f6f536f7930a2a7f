"""Text generation and embeddings using a local Ollama server"""

import logging
from typing import Optional

import httpx

from .base import TextBackend
from ..exceptions import BackendError

logger = logging.getLogger(__name__)


class OllamaTextBackend(TextBackend):
    """
    Talks to an Ollama server over its HTTP API.

    Requests have no timeout unless one is given: a generation can take
    minutes on modest hardware.
    """

    name = "ollama"

    def __init__(
        self,
        host: str = "http://127.0.0.1:11434",
        model_name: str = "gemma3:1b",
        embed_model: str = "nomic-embed-text",
        timeout: Optional[float] = None,
    ):
        self.host = host.rstrip("/")
        self.model_name = model_name
        self.embed_model = embed_model
        self.timeout = timeout

    def _post(self, path: str, payload: dict) -> dict:
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(f"{self.host}{path}", json=payload)
                response.raise_for_status()
                return response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Ollama {path} error: {e}")
            raise BackendError(f"Ollama request to {path} failed: {e}") from e

    def generate(self, prompt: str) -> str:
        data = self._post(
            "/api/generate",
            {"model": self.model_name, "prompt": prompt, "stream": False},
        )
        text = data.get("response")
        if text is None:
            raise BackendError("Ollama response has no 'response' field")
        return text.strip()

    def embed(self, text: str) -> list[float]:
        """Embed a single text with the configured embedding model."""
        data = self._post("/api/embed", {"model": self.embed_model, "input": text})
        embeddings = data.get("embeddings") or []
        if not embeddings:
            raise BackendError("Ollama returned no embeddings")
        return list(embeddings[0])
