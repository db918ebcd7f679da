"""Graceful degradation: a canned answer when every model tier has failed.

This is the floor of the fallback chain and must never raise.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict

from bedrock_router.models import DEFAULT_USE_CASE, HandlerResult
from bedrock_router.utils.logging_util import get_logger

logger = get_logger(__name__)

DEGRADED_MODEL = "DEGRADED_SERVICE"

FALLBACK_RESPONSES = {
    "general": (
        "I'm sorry, but I'm currently experiencing technical difficulties. "
        "Please try again later or contact customer service for immediate assistance."
    ),
    "product_question": (
        "I apologize, but I can't access product information right now. "
        "Please refer to our product documentation or contact customer service at 1-800-555-1234."
    ),
    "account_inquiry": (
        "I'm unable to process account inquiries at the moment. "
        "For urgent matters, please call our customer service line at 1-800-555-1234."
    ),
}

DEFAULT_RESPONSE = (
    "I'm sorry, but I'm currently experiencing technical difficulties. Please try again later."
)


def degraded_response(use_case: str) -> str:
    return FALLBACK_RESPONSES.get(use_case, DEFAULT_RESPONSE)


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    use_case = event.get("use_case") if isinstance(event, Mapping) else None
    if use_case is None:
        use_case = DEFAULT_USE_CASE
    elif not isinstance(use_case, str):
        logger.warning("Ignoring non-string use_case %r", use_case)
        use_case = DEFAULT_USE_CASE

    result = HandlerResult(
        model_used=DEGRADED_MODEL,
        use_case=use_case,
        response=degraded_response(use_case),
    )
    return result.to_response()
