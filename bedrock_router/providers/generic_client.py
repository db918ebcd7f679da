from __future__ import annotations

from typing import Any, Dict

from .base import BaseProviderAdapter, ProviderFamily, extract_text


class GenericProviderAdapter(BaseProviderAdapter):
    """
    Best-effort body for model ids outside the known families. Only used
    when the caller opts into the permissive policy (offline evaluation).
    """

    family = ProviderFamily.GENERIC

    def build_request(self, prompt: str, max_tokens: int) -> Dict[str, Any]:
        return {"prompt": prompt}

    def parse_response(self, body: Any) -> str:
        return extract_text(body, ("output",))
