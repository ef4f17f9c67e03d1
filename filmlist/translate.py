"""
Title translation through a LibreTranslate-compatible service.

Translator.translate() never raises: after the last failed attempt the
original text is returned unchanged.
"""

import time
from typing import Callable, Optional

import requests

from .config import Settings
from .logger import StructuredLogger, get_logger
from .retry import BackoffState


class Translator:
    def __init__(
        self,
        settings: Settings,
        session: Optional[requests.Session] = None,
        logger: Optional[StructuredLogger] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.base_url = settings.translate_url
        self.timeout = settings.translate_timeout
        self.max_attempts = settings.translate_attempts
        self.base_delay = settings.translate_base_delay
        self.session = session or requests.Session()
        self.logger = logger or get_logger()
        self._sleep = sleep

    def check_health(self) -> bool:
        """Probe the service root. Failures are logged, never raised."""
        self.logger.info("Testing LibreTranslate connection...")
        try:
            resp = self.session.get(f"{self.base_url}/", timeout=self.timeout)
        except Exception as e:
            self.logger.warning(f"LibreTranslate health check failed: {e}", error_type=type(e).__name__)
            return False
        if not resp.ok:
            self.logger.warning(f"LibreTranslate health check failed: {resp.status_code}")
            return False
        return True

    def _attempt(self, text: str, source_lang: str, target_lang: str, attempt: int) -> Optional[str]:
        """One POST /translate. Returns the translation, or None if the attempt failed."""
        label = f"{attempt + 1}/{self.max_attempts}"
        payload = {
            "q": text,
            "source": source_lang,
            "target": target_lang,
            "format": "text",
        }
        self.logger.info(f"Attempting to translate '{text}' (attempt {label})")
        try:
            resp = self.session.post(f"{self.base_url}/translate", json=payload, timeout=self.timeout)
            if not resp.ok:
                self.logger.warning(
                    f"Translation failed with status: {resp.status_code}",
                    title=text,
                    attempt=label,
                    body=resp.text,
                )
                return None
            data = resp.json()
        except requests.exceptions.Timeout as e:
            self.logger.warning(f"Request timeout (attempt {label}): {e}", title=text)
            return None
        except requests.exceptions.RequestException as e:
            self.logger.warning(f"HTTP request failed (attempt {label}): {e}", title=text)
            return None
        except ValueError as e:
            self.logger.warning(f"Invalid translation response (attempt {label}): {e}", title=text)
            return None
        except Exception as e:
            self.logger.warning(
                f"Unexpected error during translation (attempt {label}): {e}",
                title=text,
                error_type=type(e).__name__,
            )
            return None

        translated = data.get("translatedText") if isinstance(data, dict) else None
        if not isinstance(translated, str):
            translated = text
        self.logger.info(f"Translation successful: '{text}' -> '{translated}'")
        return translated

    def translate(self, text: str, source_lang: str = "es", target_lang: str = "en") -> str:
        backoff = BackoffState(max_attempts=self.max_attempts, base_delay=self.base_delay)

        while not backoff.done:
            if backoff.attempt == 0:
                self.check_health()

            result = self._attempt(text, source_lang, target_lang, backoff.attempt)
            if result is not None:
                self.logger.record_translation_attempt()
                backoff.record_success()
                return result

            self.logger.record_translation_attempt(failed=True)
            delay = backoff.record_failure()
            if delay is not None:
                self.logger.info(f"Waiting {int(delay * 1000)}ms before retry...", title=text)
                self._sleep(delay)

        self.logger.warning(
            f"Translation failed after {self.max_attempts} attempts. Returning original title: '{text}'"
        )
        return text
