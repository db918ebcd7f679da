from __future__ import annotations

import json
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..utils.exceptions import ModelInvocationError
from ..utils.logging_util import get_logger
from .registry import UnsupportedModelPolicy, get_adapter

logger = get_logger(__name__)


class BedrockInvoker:
    """
    Invokes Bedrock text models through InvokeModel.

    The provider family of each model id decides the request body and how the
    generated text is pulled out of the response. Exactly one call is made
    per invoke(); there are no retries.
    """

    def __init__(
        self,
        client: Any = None,
        policy: UnsupportedModelPolicy = UnsupportedModelPolicy.STRICT,
        region_name: Optional[str] = None,
    ) -> None:
        self._runtime = client
        self._region_name = region_name
        self.policy = policy

    @property
    def runtime(self) -> Any:
        # Created on first use so that importing a Lambda module never
        # needs credentials or a region.
        if self._runtime is None:
            self._runtime = boto3.client("bedrock-runtime", region_name=self._region_name)
        return self._runtime

    def invoke(
        self,
        model_id: str,
        prompt: str,
        max_tokens: int,
        params: Optional[Dict[str, Any]] = None,
    ) -> str:
        # UnsupportedModelError propagates unchanged
        adapter = get_adapter(model_id, self.policy, params)
        body = adapter.build_request(prompt, max_tokens)

        logger.debug("InvokeModel model_id=%s family=%s", model_id, adapter.family.value)

        try:
            resp = self.runtime.invoke_model(
                modelId=model_id,
                body=json.dumps(body),
                contentType="application/json",
                accept="application/json",
            )
            out = json.loads(resp["body"].read().decode("utf-8"))
        except (BotoCoreError, ClientError) as e:
            raise ModelInvocationError(f"Bedrock call to {model_id} failed: {e}", model_id) from e
        except (ValueError, KeyError) as e:
            raise ModelInvocationError(
                f"Unreadable response from {model_id}: {e}", model_id
            ) from e

        return adapter.parse_response(out)
