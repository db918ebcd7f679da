from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from .utils.exceptions import ConfigurationError


DEFAULT_USE_CASE = "general"
DEFAULT_PRIMARY_MODEL = "amazon.titan-text-express-v1"


@dataclass
class InboundRequest:
    prompt: str = ""
    use_case: str = DEFAULT_USE_CASE
    max_tokens: Optional[int] = None


@dataclass
class ModelSelectionStrategy:
    """
    Routing strategy published through AppConfig, e.g.:

      {"primary_model": "anthropic.claude-3-haiku-20240307-v1:0",
       "fallback_models": ["amazon.nova-lite-v1:0"],
       "use_case_models": {"billing": "amazon.nova-pro-v1:0"}}
    """

    primary_model: str
    fallback_models: List[str] = field(default_factory=list)
    use_case_models: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def default(cls) -> "ModelSelectionStrategy":
        return cls(primary_model=DEFAULT_PRIMARY_MODEL, fallback_models=[])

    @classmethod
    def from_dict(cls, data: Any) -> "ModelSelectionStrategy":
        if not isinstance(data, dict):
            raise ConfigurationError("Model selection strategy must be a JSON object")

        primary = data.get("primary_model")
        if not isinstance(primary, str) or not primary:
            raise ConfigurationError("primary_model is required")

        fallbacks = data.get("fallback_models") or []
        if not isinstance(fallbacks, list) or not all(isinstance(m, str) for m in fallbacks):
            raise ConfigurationError("fallback_models must be a list of model ids")

        use_case_models = data.get("use_case_models") or {}
        if not isinstance(use_case_models, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in use_case_models.items()
        ):
            raise ConfigurationError("use_case_models must map use cases to model ids")

        return cls(
            primary_model=primary,
            fallback_models=list(fallbacks),
            use_case_models=dict(use_case_models),
        )

    def candidates(self) -> List[str]:
        return [self.primary_model, *self.fallback_models]


@dataclass
class HandlerResult:
    model_used: str
    use_case: str
    response: str
    status_code: int = 200

    def to_response(self, headers: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        envelope: Dict[str, Any] = {"statusCode": self.status_code}
        if headers:
            envelope["headers"] = dict(headers)
        envelope["body"] = json.dumps(
            {
                "model_used": self.model_used,
                "use_case": self.use_case,
                "response": self.response,
            }
        )
        return envelope


# ---------- Evaluation records ----------


@dataclass
class TestCase:
    question: str
    context: str
    ground_truth: str

    __test__ = False  # not a pytest class


@dataclass
class InvokeResult:
    success: bool
    latency: float
    output: Optional[str] = None
    error: Optional[str] = None
    token_count: Optional[int] = None


@dataclass
class EvaluationResult:
    model_id: str
    question: str
    latency: float
    output: Optional[str] = None
    error: Optional[str] = None
    token_count: Optional[int] = None
    similarity_score: Optional[float] = None

    def to_row(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SummaryResult:
    model_id: str
    avg_latency: float
    avg_similarity_score: float
    avg_token_count: float


@dataclass
class ModelScore:
    model_id: str
    latency: float
    similarity_score: float
    # 0-1, higher means faster
    latency_score: float
    overall_score: float
