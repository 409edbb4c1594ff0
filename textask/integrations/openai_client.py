"""OpenAI API integration for textask.

This module wraps the OpenAI chat API as a plain text-completion oracle used
for best-effort category and duration enrichment. Every call returns a tagged
result instead of raising, so callers can always fall back to defaults.
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional, Union

from openai import OpenAI, APIError, APITimeoutError
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

# Cheap and fast; replies are a handful of tokens
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_TIMEOUT_SEC = 8.0

SYSTEM_PROMPT = "You are a terse task-triage assistant. Reply with exactly what is asked and nothing else."


@dataclass(frozen=True)
class OracleSuccess:
    """Completion text. Untrusted: validate before use."""
    text: str


@dataclass(frozen=True)
class OracleFailure:
    """The oracle could not produce a completion."""
    reason: str


OracleResult = Union[OracleSuccess, OracleFailure]


class OracleClient:
    """Client for OpenAI API integration."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
    ):
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key. If None, reads from OPENAI_API_KEY environment variable.
            model: Chat model name. If None, reads OPENAI_MODEL or uses the default.
            timeout_sec: Upper bound for a single request; SDK retries are disabled.

        Note:
            Without an API key the client still initializes; every call then
            returns OracleFailure. This allows graceful degradation.
        """
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        self.model = model or os.getenv("OPENAI_MODEL", DEFAULT_OPENAI_MODEL)
        self.timeout_sec = timeout_sec
        self.client = None

        if self.api_key:
            self.client = OpenAI(api_key=self.api_key, timeout=timeout_sec, max_retries=0)
        else:
            logger.warning("OPENAI_API_KEY not found in environment. Enrichment will use defaults.")

    @property
    def available(self) -> bool:
        return self.client is not None

    def complete(self, prompt: str, max_tokens: int, temperature: float) -> OracleResult:
        """Request a single free-text completion.

        Args:
            prompt: User prompt
            max_tokens: Completion length cap
            temperature: Sampling temperature

        Returns:
            OracleSuccess with the stripped reply, or OracleFailure if:
            - API key is not configured
            - the request times out or the API returns an error
            - the response has no text content
        """
        if not self.client:
            return OracleFailure("not_configured")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
            )
            content = response.choices[0].message.content
            if content is None or not content.strip():
                logger.warning("OpenAI returned an empty completion")
                return OracleFailure("empty_response")
            return OracleSuccess(content.strip())

        except APITimeoutError:
            logger.warning(f"OpenAI request timed out after {self.timeout_sec}s")
            return OracleFailure("timeout")
        except APIError as e:
            error_code = getattr(e, 'code', None)
            status_code = getattr(e, 'status_code', None)

            if error_code == 'insufficient_quota':
                logger.warning("OpenAI API quota insufficient. Please check billing/payment method in OpenAI dashboard.")
            elif status_code == 429:
                logger.warning("OpenAI API rate limit exceeded.")
            else:
                logger.error(f"OpenAI API error: {status_code or 'unknown'} ({error_code or 'unknown'})")

            # Don't log full error message as it might contain sensitive info
            return OracleFailure(f"api_error:{status_code or error_code or 'unknown'}")
        except Exception as e:
            # Network, malformed response, etc.
            logger.error(f"Error calling OpenAI API: {type(e).__name__}")
            return OracleFailure(type(e).__name__)
