"""Text generation using Google Gemini"""

import logging

import google.generativeai as genai

from .base import TextBackend
from ..exceptions import BackendError

logger = logging.getLogger(__name__)


class GeminiTextBackend(TextBackend):
    """
    Generates text with a Gemini model.
    """

    name = "gemini"

    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-2.0-flash",
        temperature: float = 0.8,
        max_output_tokens: int = 8000,
    ):
        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(model_name)
        self.model_name = model_name
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens

    def generate(self, prompt: str) -> str:
        try:
            response = self.model.generate_content(
                prompt,
                generation_config=genai.GenerationConfig(
                    temperature=self.temperature,
                    top_p=0.9,
                    max_output_tokens=self.max_output_tokens,
                ),
            )
            text = response.text
        except Exception as e:
            logger.error(f"Gemini generate error: {e}")
            raise BackendError(f"Gemini request failed: {e}") from e

        logger.info(f"Raw Gemini response length: {len(text)} chars")
        return text.strip()
