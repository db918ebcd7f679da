from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Union

DEFAULT_TEMPERATURE = 0.7
DEFAULT_TOP_P = 0.9


class ProviderFamily(str, Enum):
    """Wire-format dialect spoken by a class of Bedrock model ids."""

    CLAUDE = "claude"
    NOVA = "nova"
    TITAN = "titan"
    GENERIC = "generic"


def extract_text(body: Any, path: Sequence[Union[str, int]]) -> str:
    """
    Walk `path` through nested dicts/lists. Any missing key, short list or
    unexpected type yields "" instead of raising.
    """
    node = body
    for step in path:
        if isinstance(step, int):
            if not isinstance(node, list) or len(node) <= step:
                return ""
        elif not isinstance(node, dict) or step not in node:
            return ""
        node = node[step]
    if node is None:
        return ""
    return node if isinstance(node, str) else str(node)


class BaseProviderAdapter(ABC):
    """
    Abstract base for provider-family request/response translation.
    """

    family: ProviderFamily

    def __init__(self, params: Optional[Dict[str, Any]] = None) -> None:
        self.params = params or {}

    @property
    def temperature(self) -> float:
        return self.params.get("temperature", DEFAULT_TEMPERATURE)

    @property
    def top_p(self) -> float:
        return self.params.get("top_p", DEFAULT_TOP_P)

    @abstractmethod
    def build_request(self, prompt: str, max_tokens: int) -> Dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    def parse_response(self, body: Any) -> str:
        raise NotImplementedError
