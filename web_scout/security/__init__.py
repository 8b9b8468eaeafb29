"""Security module -- input validation."""

from web_scout.security.guardrails import validate_task, validate_url

__all__ = ["validate_task", "validate_url"]
