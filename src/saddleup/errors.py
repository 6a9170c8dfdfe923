"""
SaddleUp - Error types.

Callers branch on the exception type rather than on message text:

    SaddleUpError
    ├── ModelError                upstream text-generation failure
    │   ├── ChatGenerationError
    │   └── PlanGenerationError
    └── PlanParseError            model output is not a usable plan
        └── PlanValidationError

Every PlanParseError message contains "parse" so older callers that
match on the message keep working.
"""


class SaddleUpError(Exception):
    """Base class for all core errors."""


class ModelError(SaddleUpError):
    """The text-generation API failed or returned an unusable response."""

    def __init__(self, message: str, *, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ChatGenerationError(ModelError):
    """A chat turn could not be answered."""

    def __init__(self, message: str = "Failed to generate response", **kwargs):
        super().__init__(message, **kwargs)


class PlanGenerationError(ModelError):
    """The model call for a training plan failed."""

    def __init__(self, message: str = "Failed to generate training plan", **kwargs):
        super().__init__(message, **kwargs)


class PlanParseError(SaddleUpError):
    """The model returned text that is not valid plan JSON."""

    def __init__(self, detail: str):
        super().__init__(f"Failed to parse training plan: {detail}")
        self.detail = detail


class PlanValidationError(PlanParseError):
    """The plan JSON parsed but its structure is unusable (e.g. no phases)."""
