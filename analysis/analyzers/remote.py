"""
Remote Service Analyzer
=======================

Delegates interpretation to an external LLM service over HTTP.

Supported wire formats:
- openai: OpenAI-compatible chat completions (DeepSeek, GLM, Qwen,
  Moonshot, OpenAI, ...)
- anthropic: Anthropic messages API

GUARANTEES:
- is_available() only inspects configuration, never the network
- Exactly one HTTP round trip per try_analyze(), bounded by timeout
- No internal retry
- Every failure is an explicit AnalyzerOutcome
"""

from __future__ import annotations
from typing import Any, Optional
import logging
import time

import httpx

from ..config import RemoteServiceConfig
from ..contracts import AnalysisRequest
from ..prompts import AnalysisPrompt, ResponseParseError, parse_analysis_response
from .base import Analyzer, AnalyzerOutcome, AnalyzerErrorCode


logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "2023-06-01"

# Upstream error bodies can be large
MAX_ERROR_BODY_CHARS = 500


class RemoteServiceAnalyzer(Analyzer):
    """
    LLM-backed analyzer.

    EXPLICIT FAILURE STATES:
    - NOT_CONFIGURED: api key or endpoint missing
    - TIMEOUT: request exceeded timeout_seconds
    - HTTP_ERROR: non-2xx status
    - NETWORK_ERROR: connection failed
    - INVALID_RESPONSE: body is not the expected JSON shape
    """

    def __init__(
        self,
        config: RemoteServiceConfig,
        name: str = "remote-service",
        priority: int = 10,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Args:
            config: Remote service settings
            name: Analyzer identifier
            priority: Higher is tried first
            transport: Optional httpx transport (tests inject httpx.MockTransport)
        """
        self._config = config
        self._name = name
        self._priority = priority
        self._transport = transport

    @property
    def name(self) -> str:
        return self._name

    @property
    def priority(self) -> int:
        return self._priority

    @property
    def config(self) -> RemoteServiceConfig:
        return self._config

    async def is_available(self) -> bool:
        return self._config.is_configured

    async def try_analyze(self, request: AnalysisRequest) -> AnalyzerOutcome:
        if not self._config.is_configured:
            return AnalyzerOutcome.failed(
                AnalyzerErrorCode.NOT_CONFIGURED,
                "Remote service requires AI_API_KEY and AI_API_ENDPOINT"
            )

        prompt = AnalysisPrompt.create(request)
        headers, body = self._build_payload(prompt)
        start_time = time.monotonic()

        try:
            async with httpx.AsyncClient(
                timeout=self._config.timeout_seconds,
                transport=self._transport
            ) as client:
                response = await client.post(
                    self._config.endpoint,
                    headers=headers,
                    json=body
                )

        except httpx.TimeoutException:
            return AnalyzerOutcome.failed(
                AnalyzerErrorCode.TIMEOUT,
                f"Remote service timed out after {self._config.timeout_seconds}s"
            )

        except httpx.TransportError as e:
            return AnalyzerOutcome.failed(
                AnalyzerErrorCode.NETWORK_ERROR,
                f"Remote service unreachable: {e}"
            )

        except Exception as e:
            logger.exception("Remote request to %s could not be sent", self._config.endpoint)
            return AnalyzerOutcome.failed(
                AnalyzerErrorCode.INTERNAL_ERROR,
                f"Remote request failed: {type(e).__name__}: {e}"
            )

        latency_ms = (time.monotonic() - start_time) * 1000

        if not response.is_success:
            return AnalyzerOutcome.failed(
                AnalyzerErrorCode.HTTP_ERROR,
                f"Remote service error {response.status_code}: "
                f"{response.text[:MAX_ERROR_BODY_CHARS]}"
            )

        try:
            text = self._extract_text(response.json())
            result = parse_analysis_response(text, request)
        except Exception as e:
            return AnalyzerOutcome.failed(
                AnalyzerErrorCode.INVALID_RESPONSE,
                f"Malformed remote response: {e}"
            )

        logger.debug(
            "Remote analysis completed in %.0fms (model=%s, prompt=%s)",
            latency_ms, self._config.resolved_model, prompt.prompt_hash[:12]
        )
        return AnalyzerOutcome.succeeded(result)

    def _build_payload(self, prompt: AnalysisPrompt):
        """Headers and JSON body for the configured wire format."""
        model = self._config.resolved_model

        if self._config.wire_format == "anthropic":
            headers = {
                "Content-Type": "application/json",
                "x-api-key": self._config.api_key,
                "anthropic-version": ANTHROPIC_VERSION,
            }
            body = {
                "model": model,
                "max_tokens": self._config.max_tokens,
                "system": prompt.system_text,
                "messages": [{"role": "user", "content": prompt.prompt_text}],
            }
            return headers, body

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._config.api_key}",
        }
        body = {
            "model": model,
            "messages": [
                {"role": "system", "content": prompt.system_text},
                {"role": "user", "content": prompt.prompt_text},
            ],
            "temperature": self._config.temperature,
            "max_tokens": self._config.max_tokens,
        }
        return headers, body

    def _extract_text(self, data: Any) -> str:
        """Completion text from the provider envelope."""
        if not isinstance(data, dict):
            raise ResponseParseError("Response body is not a JSON object")

        try:
            if self._config.wire_format == "anthropic":
                text = data["content"][0]["text"]
            else:
                text = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise ResponseParseError("Response body is missing completion text")

        if not isinstance(text, str):
            raise ResponseParseError("Completion text is not a string")
        return text
