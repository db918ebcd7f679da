from __future__ import annotations

from typing import Any, Dict

from .base import BaseProviderAdapter, ProviderFamily, extract_text


class NovaProviderAdapter(BaseProviderAdapter):
    """
    Amazon Nova (messages with content blocks).
    """

    family = ProviderFamily.NOVA

    def build_request(self, prompt: str, max_tokens: int) -> Dict[str, Any]:
        return {
            "messages": [
                {
                    "role": "user",
                    "content": [{"text": prompt}],
                }
            ],
            "inferenceConfig": {
                "max_new_tokens": max_tokens,
                "temperature": self.temperature,
                "top_p": self.top_p,
            },
        }

    def parse_response(self, body: Any) -> str:
        # {"output": {"message": {"content": [{"text": "..."}]}}, ...}
        return extract_text(body, ("output", "message", "content", 0, "text"))
