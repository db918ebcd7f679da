"""Primary tier: the model chosen by the AppConfig strategy for the use case.

Failures are raised, not returned, so that the Step Functions state machine
can catch them and move on to the fallback tier.
"""
from __future__ import annotations

from typing import Any, Dict

from bedrock_router.config_loader import AppConfigLoader, AppConfigSettings
from bedrock_router.events import PROMPT_REQUIRED, error_response, parse_event
from bedrock_router.providers import BedrockInvoker
from bedrock_router.router import ExhaustionPolicy, ModelRouter, select_model
from bedrock_router.utils.exceptions import ModelInvocationError, RequestValidationError
from bedrock_router.utils.logging_util import get_logger

logger = get_logger(__name__)

PRIMARY_MAX_TOKENS = 500

# Reused across warm invocations
_router = ModelRouter(
    config_loader=AppConfigLoader(AppConfigSettings.from_env(defaults=True)),
    invoker=BedrockInvoker(),
    default_max_tokens=PRIMARY_MAX_TOKENS,
)


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    try:
        try:
            request = parse_event(event)
        except RequestValidationError as e:
            return error_response(400, str(e))

        if not request.prompt:
            return error_response(400, PROMPT_REQUIRED)

        model_id = select_model(_router.get_strategy(), request.use_case)
        return _router.handle([model_id], request, ExhaustionPolicy.RAISE)

    except Exception as e:
        logger.error("Error in primary lambda: %s", e)
        raise ModelInvocationError(f"Primary model failed: {e}") from e
