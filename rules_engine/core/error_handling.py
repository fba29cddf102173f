"""
Error types and validation helpers for the rules engine.

Expected gameplay failures (not enough resources, unknown resource ids,
non-spellcasters) are never raised: they are reported through the
``success`` flag of the returned results. The exceptions below are reserved
for programming and data-authoring errors.
"""

from typing import Any, Optional

from .logging import log_error, log_warning


class RulesEngineError(Exception):
    """Base class for all the errors raised by the rules engine."""


class InvalidDiceNotationError(RulesEngineError, ValueError):
    """Raised when a dice notation string cannot be parsed."""

    def __init__(self, notation: str, reason: str = "") -> None:
        self.notation = notation
        self.reason = reason
        message = f"Invalid dice notation: {notation!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class UnknownConditionError(RulesEngineError, KeyError):
    """Raised when condition data is explicitly requested for an unknown id."""

    def __init__(self, condition_id: str) -> None:
        self.condition_id = condition_id
        super().__init__(f"Unknown condition: {condition_id!r}")

    def __str__(self) -> str:
        # KeyError quotes its argument, keep the plain message instead.
        return str(self.args[0])


# ==============================================================================
# VALIDATION HELPERS
# ==============================================================================


def require_non_empty_string(
    value: Any, param_name: str, context: Optional[dict[str, Any]] = None
) -> str:
    """
    Validates that a value is a non-empty string.

    Args:
        value: The value to validate
        param_name: Human-readable parameter name for error messages
        context: Additional context for logging

    Returns:
        str: The validated string value

    Raises:
        ValueError: If validation fails
    """
    if not value or not isinstance(value, str):
        log_error(
            f"{param_name} must be a non-empty string, got: {value}",
            {
                **(context or {}),
                "param_name": param_name,
                "type": type(value).__name__,
            },
        )
        raise ValueError(f"Invalid {param_name}: {value!r}")
    return value


def ensure_non_negative_int(
    value: Any, param_name: str, default: int = 0, context: Optional[dict[str, Any]] = None
) -> int:
    """
    Ensures a value is a non-negative integer, correcting if needed.
    Logs a warning for invalid values but continues execution.

    Args:
        value: The value to ensure is a non-negative integer
        param_name: Human-readable parameter name for error messages
        default: Default value if correction is needed
        context: Additional context for logging

    Returns:
        int: The corrected integer value
    """
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        log_warning(
            f"{param_name} must be non-negative integer, got: {value}, correcting",
            {
                **(context or {}),
                "param_name": param_name,
                "value": value,
            },
        )
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return max(0, int(value))
        return default
    return value
