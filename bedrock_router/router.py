from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from .config_loader import AppConfigLoader
from .events import ALL_MODELS_UNAVAILABLE, error_response
from .models import HandlerResult, InboundRequest, ModelSelectionStrategy
from .providers import BedrockInvoker
from .utils.exceptions import ModelsExhaustedError
from .utils.logging_util import get_logger

logger = get_logger(__name__)


def select_model(strategy: ModelSelectionStrategy, use_case: str) -> str:
    """Use-case override if one exists (exact key match), else the primary model."""
    use_case_models = strategy.use_case_models or {}
    if use_case in use_case_models:
        return use_case_models[use_case]
    return strategy.primary_model


class ExhaustionPolicy(str, Enum):
    # Chained topology: let the orchestrator move to the next tier
    RAISE = "raise"
    # Self-contained topology: answer the caller with a 503 envelope
    RETURN_503 = "return_503"


class ModelRouter:
    """
    Main entry point:
      strategy = router.get_strategy()
      response = router.handle(strategy.candidates(), request, ExhaustionPolicy.RETURN_503)

    Candidates are tried strictly in order, one attempt each.
    """

    def __init__(
        self,
        config_loader: Optional[AppConfigLoader] = None,
        invoker: Optional[BedrockInvoker] = None,
        default_max_tokens: int = 500,
    ) -> None:
        self._config_loader = config_loader or AppConfigLoader()
        self._invoker = invoker or BedrockInvoker()
        self.default_max_tokens = default_max_tokens

    @property
    def config_loader(self) -> AppConfigLoader:
        return self._config_loader

    @property
    def invoker(self) -> BedrockInvoker:
        return self._invoker

    # ---------- Public API ----------

    def get_strategy(self) -> ModelSelectionStrategy:
        return self._config_loader.get_strategy()

    def select_model(self, use_case: str) -> str:
        return select_model(self.get_strategy(), use_case)

    def route(
        self,
        candidates: Sequence[str],
        request: InboundRequest,
        params: Optional[Dict[str, Any]] = None,
    ) -> HandlerResult:
        """
        Result from the first candidate that answers. Raises
        ModelsExhaustedError when none does.
        """
        max_tokens = request.max_tokens or self.default_max_tokens
        tried: List[str] = []
        last_error: Optional[Exception] = None

        for model_id in candidates:
            tried.append(model_id)
            try:
                logger.info("Trying model: %s", model_id)
                text = self._invoker.invoke(model_id, request.prompt, max_tokens, params)
            except Exception as e:
                logger.error("Model %s failed: %s", model_id, e)
                last_error = e
                continue
            return HandlerResult(model_used=model_id, use_case=request.use_case, response=text)

        raise ModelsExhaustedError(tried, last_error)

    def handle(
        self,
        candidates: Sequence[str],
        request: InboundRequest,
        policy: ExhaustionPolicy = ExhaustionPolicy.RAISE,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """route() wrapped into a Lambda response envelope according to `policy`."""
        try:
            result = self.route(candidates, request, params)
        except ModelsExhaustedError as e:
            if policy is ExhaustionPolicy.RAISE:
                raise
            message = str(e.last_error) if e.last_error is not None else "Unknown error"
            return error_response(503, ALL_MODELS_UNAVAILABLE, message, headers=headers)
        return result.to_response(headers)
