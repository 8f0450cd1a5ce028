"""Validation rules for the remote plan generation settings."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RemotePlanConfig:
    model: str
    endpoint: str
    max_output_tokens: int
    timeout_seconds: float


def validate_remote_config(config: RemotePlanConfig) -> None:
    if not config.model.strip():
        raise ValueError("model must be a non-empty identifier")
    if not config.endpoint.strip():
        raise ValueError("endpoint must be a non-empty URL")
    if config.max_output_tokens <= 0:
        raise ValueError("max_output_tokens must be > 0")
    if config.timeout_seconds <= 0:
        raise ValueError("timeout_seconds must be > 0")
