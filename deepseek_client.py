import logging
from typing import Dict, List, Optional

import requests

from config import DeepSeekSettings
from course_core import ConfigurationError

logger = logging.getLogger(__name__)


class DeepSeekClient:
    """Thin wrapper around the DeepSeek chat-completion endpoint."""

    def __init__(self, settings: DeepSeekSettings):
        self.settings = settings
        logger.info(f"DeepSeekClient initialized for {settings.api_url} (model={settings.model})")

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.settings.api_key}",
            "Content-Type": "application/json",
        }

    def forward(self, body) -> requests.Response:
        """
        Posts `body` and returns the raw upstream response.
        Bytes/str bodies are sent as-is; anything else is JSON-encoded.
        Raises ConfigurationError without a key and requests.RequestException on transport failure.
        """
        self.settings.validate()
        if isinstance(body, (bytes, str)):
            return requests.post(self.settings.api_url, headers=self._headers(),
                                 data=body, timeout=self.settings.timeout)
        return requests.post(self.settings.api_url, headers=self._headers(),
                             json=body, timeout=self.settings.timeout)

    def build_payload(self, messages: List[Dict[str, str]]) -> Dict:
        return {
            "model": self.settings.model,
            "messages": messages,
            "temperature": self.settings.temperature,
        }

    def chat(self, prompt: str) -> Optional[str]:
        """
        Sends one user message and returns the reply text.
        Every failure is logged and reported as None.
        """
        payload = self.build_payload([{"role": "user", "content": prompt}])

        try:
            response = self.forward(payload)
        except ConfigurationError as e:
            logger.error(f"DeepSeek API key not configured: {e}")
            return None
        except requests.Timeout:
            logger.warning(f"DeepSeek request timed out after {self.settings.timeout}s")
            return None
        except requests.RequestException as e:
            logger.error(f"DeepSeek request failed: {e}")
            return None

        if not response.ok:
            logger.warning(f"DeepSeek API error {response.status_code}: {response.text[:200]}")
            return None

        try:
            data = response.json()
            return data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.warning(f"Unexpected DeepSeek response shape: {e}")
            return None
