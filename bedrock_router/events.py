"""Inbound event decoding and outbound response envelopes.

Two event shapes reach the handlers:

1) API Gateway proxy (body is a JSON string):
   {"body": "{\"prompt\": \"hi\", \"use_case\": \"billing\"}", "httpMethod": "POST", "path": "/chat"}

2) Direct invoke, e.g. from a Step Functions state (the event is the payload):
   {"prompt": "hi", "use_case": "billing"}
"""
from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional

from .models import DEFAULT_USE_CASE, InboundRequest
from .utils.exceptions import RequestValidationError

JSON_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
}

PROMPT_REQUIRED = "Prompt is required"
BODY_REQUIRED = "Request body is required"
ALL_MODELS_UNAVAILABLE = "All models unavailable"
INTERNAL_ERROR = "Internal server error"


def decode_body(body: Any) -> Dict[str, Any]:
    if isinstance(body, Mapping):
        return dict(body)
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8")
    payload = json.loads(body)
    if not isinstance(payload, dict):
        raise RequestValidationError("Request body must be a JSON object")
    return payload


def extract_payload(event: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """The API Gateway body if there is one, otherwise the event itself."""
    event = event or {}
    if event.get("body"):
        return decode_body(event["body"])
    return dict(event)


def to_request(payload: Mapping[str, Any]) -> InboundRequest:
    prompt = payload.get("prompt")
    if prompt is None:
        prompt = ""
    if not isinstance(prompt, str):
        raise RequestValidationError("prompt must be a string")

    use_case = payload.get("use_case")
    if use_case is None:
        use_case = DEFAULT_USE_CASE
    if not isinstance(use_case, str):
        raise RequestValidationError("use_case must be a string")

    max_tokens = payload.get("max_tokens")
    if max_tokens is not None and (
        isinstance(max_tokens, bool) or not isinstance(max_tokens, int) or max_tokens <= 0
    ):
        raise RequestValidationError("max_tokens must be a positive integer")

    return InboundRequest(prompt=prompt, use_case=use_case, max_tokens=max_tokens)


def parse_event(event: Optional[Mapping[str, Any]]) -> InboundRequest:
    return to_request(extract_payload(event))


def require_prompt(request: InboundRequest) -> None:
    if not request.prompt:
        raise RequestValidationError(PROMPT_REQUIRED)


def error_response(
    status_code: int,
    error: str,
    message: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": error}
    if message is not None:
        body["message"] = message

    envelope: Dict[str, Any] = {"statusCode": status_code}
    if headers:
        envelope["headers"] = dict(headers)
    envelope["body"] = json.dumps(body)
    return envelope
