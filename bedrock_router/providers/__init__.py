from .base import BaseProviderAdapter, ProviderFamily
from .anthropic_client import AnthropicProviderAdapter
from .nova_client import NovaProviderAdapter
from .titan_client import TitanProviderAdapter
from .generic_client import GenericProviderAdapter
from .registry import (
    UnsupportedModelPolicy,
    build_request,
    get_adapter,
    parse_response,
    resolve_family,
)
from .bedrock_client import BedrockInvoker

__all__ = [
    "BaseProviderAdapter",
    "ProviderFamily",
    "AnthropicProviderAdapter",
    "NovaProviderAdapter",
    "TitanProviderAdapter",
    "GenericProviderAdapter",
    "UnsupportedModelPolicy",
    "build_request",
    "get_adapter",
    "parse_response",
    "resolve_family",
    "BedrockInvoker",
]
