"""API Gateway handler that walks the whole model list itself.

Tries the AppConfig primary model, then each fallback model in order, and
answers 503 when all of them fail instead of relying on an orchestrator.
"""
from __future__ import annotations

from typing import Any, Dict

from bedrock_router.config_loader import AppConfigLoader, AppConfigSettings
from bedrock_router.events import (
    BODY_REQUIRED,
    INTERNAL_ERROR,
    JSON_HEADERS,
    decode_body,
    error_response,
    require_prompt,
    to_request,
)
from bedrock_router.providers import BedrockInvoker
from bedrock_router.router import ExhaustionPolicy, ModelRouter
from bedrock_router.utils.exceptions import RequestValidationError
from bedrock_router.utils.logging_util import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_TOKENS = 500

# No default AppConfig identifiers here: unset variables mean the default strategy
_router = ModelRouter(
    config_loader=AppConfigLoader(AppConfigSettings.from_env(defaults=False)),
    invoker=BedrockInvoker(),
    default_max_tokens=DEFAULT_MAX_TOKENS,
)


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    try:
        body = (event or {}).get("body")
        if not body:
            return error_response(400, BODY_REQUIRED, headers=JSON_HEADERS)

        try:
            request = to_request(decode_body(body))
            require_prompt(request)
        except RequestValidationError as e:
            return error_response(400, str(e), headers=JSON_HEADERS)

        strategy = _router.get_strategy()
        return _router.handle(
            strategy.candidates(),
            request,
            ExhaustionPolicy.RETURN_503,
            headers=JSON_HEADERS,
        )

    except Exception as e:
        logger.exception("Handler error: %s", e)
        return error_response(500, INTERNAL_ERROR, str(e), headers=JSON_HEADERS)
