from __future__ import annotations

from typing import Any, Dict

from .base import BaseProviderAdapter, ProviderFamily, extract_text

ANTHROPIC_VERSION = "bedrock-2023-05-31"


class AnthropicProviderAdapter(BaseProviderAdapter):
    """
    Anthropic Claude on Bedrock (Messages API). Temperature and top_p are
    left to the model defaults.
    """

    family = ProviderFamily.CLAUDE

    def build_request(self, prompt: str, max_tokens: int) -> Dict[str, Any]:
        return {
            "anthropic_version": ANTHROPIC_VERSION,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }

    def parse_response(self, body: Any) -> str:
        # {"content": [{"type": "text", "text": "..."}], ...}
        return extract_text(body, ("content", 0, "text"))
