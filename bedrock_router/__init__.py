from .config_loader import AppConfigLoader, AppConfigSettings
from .models import HandlerResult, InboundRequest, ModelSelectionStrategy
from .providers import BedrockInvoker, ProviderFamily, UnsupportedModelPolicy
from .router import ExhaustionPolicy, ModelRouter, select_model

__all__ = [
    "AppConfigLoader",
    "AppConfigSettings",
    "HandlerResult",
    "InboundRequest",
    "ModelSelectionStrategy",
    "BedrockInvoker",
    "ProviderFamily",
    "UnsupportedModelPolicy",
    "ExhaustionPolicy",
    "ModelRouter",
    "select_model",
]
