from __future__ import annotations

from typing import Optional


class ModelRouterError(Exception):
    """Base class for every error raised by bedrock_router."""


class ConfigurationError(ModelRouterError):
    """Remote configuration could not be fetched or parsed."""


class RequestValidationError(ModelRouterError):
    """Inbound request is malformed (e.g. empty prompt)."""


class UnsupportedModelError(ModelRouterError):
    def __init__(self, model_id: str) -> None:
        super().__init__(f"Unsupported model: {model_id}")
        self.model_id = model_id


class ModelInvocationError(ModelRouterError):
    def __init__(self, message: str, model_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.model_id = model_id


class ModelsExhaustedError(ModelInvocationError):
    """
    Every candidate model failed. `last_error` is the error raised by the
    final candidate that was tried.
    """

    def __init__(self, candidates, last_error: Optional[BaseException]) -> None:
        message = str(last_error) if last_error is not None else "No candidate models"
        super().__init__(message)
        self.candidates = list(candidates)
        self.last_error = last_error
