from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Any, Dict, Optional, Tuple, Type

from ..utils.exceptions import UnsupportedModelError
from .anthropic_client import AnthropicProviderAdapter
from .base import BaseProviderAdapter, ProviderFamily
from .generic_client import GenericProviderAdapter
from .nova_client import NovaProviderAdapter
from .titan_client import TitanProviderAdapter


class UnsupportedModelPolicy(str, Enum):
    STRICT = "strict"  # request handlers: unknown model id is an error
    PERMISSIVE = "permissive"  # evaluation: send a generic {"prompt": ...} body


# Checked in order, first substring match wins.
MODEL_FAMILY_PATTERNS: Tuple[Tuple[str, ProviderFamily], ...] = (
    ("anthropic", ProviderFamily.CLAUDE),
    ("nova", ProviderFamily.NOVA),
    ("titan-text", ProviderFamily.TITAN),
)

ADAPTERS: Dict[ProviderFamily, Type[BaseProviderAdapter]] = {
    ProviderFamily.CLAUDE: AnthropicProviderAdapter,
    ProviderFamily.NOVA: NovaProviderAdapter,
    ProviderFamily.TITAN: TitanProviderAdapter,
    ProviderFamily.GENERIC: GenericProviderAdapter,
}


@lru_cache(maxsize=256)
def resolve_family(
    model_id: str,
    policy: UnsupportedModelPolicy = UnsupportedModelPolicy.STRICT,
) -> ProviderFamily:
    for pattern, family in MODEL_FAMILY_PATTERNS:
        if pattern in model_id:
            return family
    if policy is UnsupportedModelPolicy.PERMISSIVE:
        return ProviderFamily.GENERIC
    raise UnsupportedModelError(model_id)


def get_adapter(
    model_id: str,
    policy: UnsupportedModelPolicy = UnsupportedModelPolicy.STRICT,
    params: Optional[Dict[str, Any]] = None,
) -> BaseProviderAdapter:
    family = resolve_family(model_id, policy)
    return ADAPTERS[family](params)


def build_request(
    model_id: str,
    prompt: str,
    max_tokens: int,
    policy: UnsupportedModelPolicy = UnsupportedModelPolicy.STRICT,
    params: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    return get_adapter(model_id, policy, params).build_request(prompt, max_tokens)


def parse_response(
    model_id: str,
    body: Any,
    policy: UnsupportedModelPolicy = UnsupportedModelPolicy.STRICT,
) -> str:
    return get_adapter(model_id, policy).parse_response(body)
