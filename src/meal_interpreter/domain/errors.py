"""Failure taxonomy for meal interpretation."""

_SNIPPET_LIMIT = 200


class InterpretError(Exception):
    """Base error carrying a machine-readable kind."""

    kind = "interpret_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInput(InterpretError):
    """The caller supplied an unusable meal description."""

    kind = "invalid_input"


class ModelUnavailable(InterpretError):
    """The language model could not be reached or refused the request."""

    kind = "model_unavailable"


class MalformedModelOutput(InterpretError):
    """The model replied, but not with a valid nutrition record."""

    kind = "malformed_model_output"

    def __init__(self, message: str, raw_text: str = "") -> None:
        super().__init__(message)
        self.raw_snippet = raw_text[:_SNIPPET_LIMIT]
