"""
Analysis Configuration

Frozen settings built once at startup from environment variables.

ENVIRONMENT:
============
AI_API_KEY          remote service API key
AI_API_ENDPOINT     full URL, e.g. https://api.deepseek.com/v1/chat/completions
AI_MODEL            model name (optional, defaults per wire format)
AI_API_FORMAT       "openai" | "anthropic" (optional, detected from endpoint)
AI_TIMEOUT_SECONDS  remote call timeout (default 30)
AI_MAX_TOKENS       completion token limit (default 2048)
AI_TEMPERATURE      sampling temperature for openai format (default 0.7)
LOCAL_RULES_PATH    optional JSON rule book for the local analyzer
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Mapping
from pathlib import Path
import os


WIRE_FORMATS = frozenset({"openai", "anthropic"})

DEFAULT_MODELS = {
    "openai": "gpt-4o",
    "anthropic": "claude-sonnet-4-20250514",
}


class ConfigurationError(Exception):
    """Raised at startup for unusable settings. Never raised by analyze()."""
    pass


def detect_wire_format(endpoint: str, explicit: Optional[str] = None) -> str:
    """Explicit format wins; otherwise anthropic.com endpoints speak anthropic."""
    if explicit:
        fmt = explicit.strip().lower()
        if fmt not in WIRE_FORMATS:
            raise ConfigurationError(
                f"AI_API_FORMAT must be one of {sorted(WIRE_FORMATS)}, got '{explicit}'"
            )
        return fmt

    if "anthropic.com" in endpoint:
        return "anthropic"
    return "openai"


def _env_float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = (environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got '{raw}'")


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = (environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got '{raw}'")


@dataclass(frozen=True)
class RemoteServiceConfig:
    """
    Remote inference service settings.

    An empty api_key or endpoint means "not configured"; the remote
    analyzer then reports itself unavailable.
    """
    api_key: str = ""
    endpoint: str = ""
    model: str = ""
    wire_format: str = "openai"
    timeout_seconds: float = 30.0
    max_tokens: int = 2048
    temperature: float = 0.7

    def __post_init__(self):
        if self.wire_format not in WIRE_FORMATS:
            raise ConfigurationError(f"Unsupported wire format: {self.wire_format}")
        if self.timeout_seconds <= 0:
            raise ConfigurationError("timeout_seconds must be positive")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key) and bool(self.endpoint)

    @property
    def resolved_model(self) -> str:
        return self.model or DEFAULT_MODELS[self.wire_format]

    def __repr__(self) -> str:
        # Never echo the key
        return (
            f"RemoteServiceConfig(endpoint={self.endpoint!r}, model={self.resolved_model!r}, "
            f"wire_format={self.wire_format!r}, configured={self.is_configured})"
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> RemoteServiceConfig:
        env = os.environ if environ is None else environ
        endpoint = (env.get("AI_API_ENDPOINT") or "").strip()

        return cls(
            api_key=(env.get("AI_API_KEY") or "").strip(),
            endpoint=endpoint,
            model=(env.get("AI_MODEL") or "").strip(),
            wire_format=detect_wire_format(endpoint, env.get("AI_API_FORMAT")),
            timeout_seconds=_env_float(env, "AI_TIMEOUT_SECONDS", 30.0),
            max_tokens=_env_int(env, "AI_MAX_TOKENS", 2048),
            temperature=_env_float(env, "AI_TEMPERATURE", 0.7),
        )


@dataclass(frozen=True)
class AnalysisSettings:
    """Everything needed to wire the default orchestrator."""
    remote: RemoteServiceConfig = field(default_factory=RemoteServiceConfig)
    local_rules_path: Optional[Path] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> AnalysisSettings:
        env = os.environ if environ is None else environ
        rules_path = (env.get("LOCAL_RULES_PATH") or "").strip()

        return cls(
            remote=RemoteServiceConfig.from_env(env),
            local_rules_path=Path(rules_path) if rules_path else None,
        )
