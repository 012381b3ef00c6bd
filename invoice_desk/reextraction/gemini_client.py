"""
Gemini Client Module

Minimal client for the generative-language REST API used by the AI
re-extraction pass.
"""

import os
from typing import Any, Dict, Optional

import requests

from config import get_config
from invoice_desk.utils.exceptions import ReExtractionConfigError, ReExtractionError
from invoice_desk.utils.logger import get_logger

logger = get_logger(__name__)


class GeminiClient:
    """Client for the generateContent endpoint"""

    DEFAULT_ENDPOINT = (
        "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
    )
    DEFAULT_MODEL = "gemini-2.0-flash-exp"
    DEFAULT_GENERATION = {
        "temperature": 0.1,
        "topK": 1,
        "topP": 1,
        "maxOutputTokens": 2048,
    }

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        endpoint: Optional[str] = None,
        timeout: Optional[float] = None,
        generation_config: Optional[Dict[str, Any]] = None
    ):
        """Initialize the client

        Args:
            api_key: API key. If None, read from the environment variable
                named by ``reextraction.api_key_env``.
            model: Model name.
            endpoint: Endpoint template with a ``{model}`` placeholder.
            timeout: Request timeout in seconds.
            generation_config: Overrides for the sampling parameters.
        """
        self.api_key_env = get_config("reextraction.api_key_env", "GEMINI_API")
        self.api_key = api_key or os.getenv(self.api_key_env)
        self.model = model or get_config("reextraction.model", self.DEFAULT_MODEL)
        self.endpoint = endpoint or get_config("reextraction.endpoint", self.DEFAULT_ENDPOINT)
        self.timeout = timeout or get_config("reextraction.timeout", 30)

        self.generation_config = dict(self.DEFAULT_GENERATION)
        self.generation_config.update(get_config("reextraction.generation", {}) or {})
        if generation_config:
            self.generation_config.update(generation_config)

        logger.debug(f"Gemini client initialized with model: {self.model}")

    @property
    def url(self) -> str:
        return self.endpoint.format(model=self.model)

    def generate_text(self, prompt: str) -> str:
        """Send a prompt and return the first candidate's text

        Args:
            prompt: The input prompt

        Returns:
            str: The generated text

        Raises:
            ReExtractionConfigError: If no API key is configured
            ReExtractionError: If the call fails or returns no text
        """
        if not self.api_key:
            raise ReExtractionConfigError(self.api_key_env)

        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": self.generation_config,
        }

        try:
            response = requests.post(
                self.url,
                params={"key": self.api_key},
                headers={"Content-Type": "application/json"},
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
            result = response.json()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.error(f"Gemini API error: {e}")
            raise ReExtractionError(str(e), status_code=status) from e
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Gemini request failed: {e}")
            raise ReExtractionError(str(e)) from e

        try:
            text = result["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            text = None

        if not text:
            raise ReExtractionError("No response text from Gemini API")

        return text
