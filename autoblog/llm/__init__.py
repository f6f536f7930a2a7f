"""Generative text and embedding backends"""

from .base import TextBackend
from ..config import Settings


def create_text_backend(settings: Settings) -> TextBackend:
    """Build the text backend selected by LLM_PROVIDER."""
    provider = settings.llm_provider.lower()

    if provider == "gemini":
        from .gemini_backend import GeminiTextBackend

        if not settings.gemini_api_key:
            raise ValueError("GEMINI_API_KEY is required when LLM_PROVIDER=gemini")
        return GeminiTextBackend(api_key=settings.gemini_api_key, model_name=settings.gemini_model)

    if provider == "ollama":
        from .ollama_backend import OllamaTextBackend

        return OllamaTextBackend(
            host=settings.ollama_host,
            model_name=settings.ollama_model,
            embed_model=settings.ollama_embed_model,
        )

    raise ValueError(f"Unknown LLM_PROVIDER: {settings.llm_provider}")


def create_embedder(settings: Settings):
    """Build the embedding backend selected by EMBEDDING_PROVIDER."""
    provider = settings.embedding_provider.lower()

    if provider == "sentence-transformers":
        from .embedder import SemanticEmbedder

        return SemanticEmbedder(settings.embedding_model)

    if provider == "ollama":
        from .ollama_backend import OllamaTextBackend

        return OllamaTextBackend(host=settings.ollama_host, embed_model=settings.ollama_embed_model)

    raise ValueError(f"Unknown EMBEDDING_PROVIDER: {settings.embedding_provider}")


__all__ = ["TextBackend", "create_text_backend", "create_embedder"]
