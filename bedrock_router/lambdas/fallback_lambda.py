"""Fallback tier: one simple, reliable model with a reduced token budget.

Reached when the primary tier raised. Raises in turn so the state machine
can move on to graceful degradation.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict

from bedrock_router.events import parse_event
from bedrock_router.providers import BedrockInvoker
from bedrock_router.router import ModelRouter
from bedrock_router.utils.exceptions import ModelInvocationError
from bedrock_router.utils.logging_util import get_logger

logger = get_logger(__name__)

FALLBACK_MODEL_ID = "amazon.titan-text-express-v1"
FALLBACK_MAX_TOKENS = 300
FALLBACK_PARAMS = {"temperature": 0.5, "top_p": 0.9}

_router = ModelRouter(invoker=BedrockInvoker(), default_max_tokens=FALLBACK_MAX_TOKENS)


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    try:
        # No prompt validation here; the primary tier already did it
        request = replace(parse_event(event), max_tokens=FALLBACK_MAX_TOKENS)
        result = _router.route([FALLBACK_MODEL_ID], request, FALLBACK_PARAMS)
    except Exception as e:
        logger.error("Error in fallback lambda: %s", e)
        raise ModelInvocationError(f"Fallback model failed: {e}", FALLBACK_MODEL_ID) from e

    result.model_used = f"FALLBACK:{result.model_used}"
    return result.to_response()
