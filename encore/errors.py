"""
Encore Error Hierarchy

Unified exception hierarchy for the rules engine and its host. All custom
exceptions inherit from EncoreError for easy catching and filtering.

Game operations never let these escape: the engine catches rule failures at
the operation boundary and returns the unchanged state. Setup-time problems
(bad player list, malformed board) are raised to the caller.

Usage:
    from encore.errors import RulesViolationError

    try:
        validate_move(squares, color, board)
    except RulesViolationError as e:
        logger.debug(f"Invalid move: {e.message}, rule: {e.rule_ref}")
"""

from typing import Any

__all__ = [
    # AI errors
    "AIError",
    "ConfigurationError",
    # Base error
    "EncoreError",
    "InvalidBoardError",
    "InvalidMoveError",
    "InvalidSetupError",
    "InvalidStateError",
    # Game rules errors
    "RulesViolationError",
]


class EncoreError(Exception):
    """Base exception for all Encore errors.

    Attributes:
        code: Machine-readable error code for categorization
        message: Human-readable error description
        context: Additional context for debugging
    """
    code: str = "ENCORE_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


# =============================================================================
# Game Rules Errors
# =============================================================================


class RulesViolationError(EncoreError):
    """Squares that break a crossing rule.

    Attributes:
        rule_ref: Short name of the failing rule (e.g. "anchor-column")
    """
    code: str = "RULES_VIOLATION"

    def __init__(
        self,
        message: str,
        rule_ref: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        self.rule_ref = rule_ref
        if rule_ref:
            self.context["rule_ref"] = rule_ref


class InvalidMoveError(EncoreError):
    """Input that cannot be applied to the current state.

    Raised when an operation is well formed but not allowed right now
    (wrong phase, die already used, not enough jokers).
    """
    code: str = "INVALID_MOVE"


class InvalidStateError(EncoreError):
    """Corrupted or unexpected game state."""
    code: str = "INVALID_STATE"


# =============================================================================
# Setup Errors
# =============================================================================


class InvalidSetupError(EncoreError):
    """Game could not be created from the given players and boards."""
    code: str = "INVALID_SETUP"


class InvalidBoardError(InvalidSetupError):
    """Board configuration fails the structural invariants.

    Attributes:
        errors: Every violated constraint, as reported by the validator
    """
    code: str = "INVALID_BOARD"

    def __init__(
        self,
        message: str,
        errors: list[str] | None = None,
        board_id: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        self.errors = list(errors or [])
        if board_id:
            self.context["board_id"] = board_id
        if self.errors:
            self.context["errors"] = self.errors


class ConfigurationError(EncoreError):
    """Invalid configuration value."""
    code: str = "CONFIGURATION_ERROR"


# =============================================================================
# AI Errors
# =============================================================================


class AIError(EncoreError):
    """Base class for AI-related errors."""
    code: str = "AI_ERROR"
