from __future__ import annotations

from typing import Any, Dict

from .base import BaseProviderAdapter, ProviderFamily, extract_text


class TitanProviderAdapter(BaseProviderAdapter):
    """
    Amazon Titan Text (flat inputText).
    """

    family = ProviderFamily.TITAN

    def build_request(self, prompt: str, max_tokens: int) -> Dict[str, Any]:
        return {
            "inputText": prompt,
            "textGenerationConfig": {
                "maxTokenCount": max_tokens,
                "temperature": self.temperature,
                "topP": self.top_p,
            },
        }

    def parse_response(self, body: Any) -> str:
        # {"results": [{"outputText": "...", "tokenCount": 12}], ...}
        return extract_text(body, ("results", 0, "outputText"))
