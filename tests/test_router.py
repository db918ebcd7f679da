"""Unit tests for model selection and the candidate loop."""

import json

import pytest

from bedrock_router.models import InboundRequest, ModelSelectionStrategy
from bedrock_router.router import ExhaustionPolicy, select_model
from bedrock_router.utils.exceptions import ModelsExhaustedError, UnsupportedModelError
from tests.helpers.aws_fakes import CLAUDE_MODEL, NOVA_MODEL, TITAN_MODEL, nova_body, titan_body


class TestSelectModel:

    def test_use_case_override_and_primary(self):
        strategy = ModelSelectionStrategy(
            primary_model="modelB",
            use_case_models={"billing": "modelA"},
        )
        assert select_model(strategy, "billing") == "modelA"
        assert select_model(strategy, "support") == "modelB"

    def test_exact_key_match_only(self):
        strategy = ModelSelectionStrategy(primary_model="modelB", use_case_models={"billing": "modelA"})
        assert select_model(strategy, "Billing") == "modelB"
        assert select_model(strategy, " billing") == "modelB"

    def test_no_overrides(self):
        assert select_model(ModelSelectionStrategy(primary_model="modelB"), "billing") == "modelB"


class TestRoute:

    def test_first_success_wins(self, make_router, bedrock_runtime):
        bedrock_runtime.responses[CLAUDE_MODEL] = RuntimeError("model down")
        bedrock_runtime.responses[NOVA_MODEL] = nova_body("from nova")
        bedrock_runtime.responses[TITAN_MODEL] = titan_body("from titan")

        result = make_router().route(
            [CLAUDE_MODEL, NOVA_MODEL, TITAN_MODEL],
            InboundRequest(prompt="hi", use_case="general"),
        )

        assert result.model_used == NOVA_MODEL
        assert result.response == "from nova"
        assert bedrock_runtime.models_called == [CLAUDE_MODEL, NOVA_MODEL]

    def test_default_max_tokens_and_request_override(self, make_router, bedrock_runtime):
        bedrock_runtime.responses[TITAN_MODEL] = titan_body("ok")
        router = make_router(default_max_tokens=321)

        router.route([TITAN_MODEL], InboundRequest(prompt="hi"))
        router.route([TITAN_MODEL], InboundRequest(prompt="hi", max_tokens=42))

        assert bedrock_runtime.sent_body(0)["textGenerationConfig"]["maxTokenCount"] == 321
        assert bedrock_runtime.sent_body(1)["textGenerationConfig"]["maxTokenCount"] == 42

    def test_unsupported_model_counts_as_failed_candidate(self, make_router, bedrock_runtime):
        bedrock_runtime.responses[TITAN_MODEL] = titan_body("ok")

        result = make_router().route(["meta.llama3-70b", TITAN_MODEL], InboundRequest(prompt="hi"))

        assert result.model_used == TITAN_MODEL

    def test_exhaustion_raises_with_last_error(self, make_router):
        with pytest.raises(ModelsExhaustedError) as exc:
            make_router().route(["meta.llama3-70b"], InboundRequest(prompt="hi"))
        assert isinstance(exc.value.last_error, UnsupportedModelError)
        assert exc.value.candidates == ["meta.llama3-70b"]

    def test_one_attempt_per_candidate(self, make_router, bedrock_runtime):
        with pytest.raises(ModelsExhaustedError):
            make_router().route([NOVA_MODEL, TITAN_MODEL], InboundRequest(prompt="hi"))
        assert bedrock_runtime.models_called == [NOVA_MODEL, TITAN_MODEL]


class TestHandle:

    def test_success_envelope(self, make_router, bedrock_runtime):
        bedrock_runtime.responses[NOVA_MODEL] = nova_body("answer")

        response = make_router().handle([NOVA_MODEL], InboundRequest(prompt="hi", use_case="billing"))

        assert response["statusCode"] == 200
        assert json.loads(response["body"]) == {
            "model_used": NOVA_MODEL,
            "use_case": "billing",
            "response": "answer",
        }

    def test_return_503_policy(self, make_router):
        response = make_router().handle(
            [NOVA_MODEL],
            InboundRequest(prompt="hi"),
            ExhaustionPolicy.RETURN_503,
            headers={"Content-Type": "application/json"},
        )

        assert response["statusCode"] == 503
        assert response["headers"] == {"Content-Type": "application/json"}
        body = json.loads(response["body"])
        assert body["error"] == "All models unavailable"
        assert "Rate exceeded" in body["message"]

    def test_raise_policy(self, make_router):
        with pytest.raises(ModelsExhaustedError):
            make_router().handle([NOVA_MODEL], InboundRequest(prompt="hi"), ExhaustionPolicy.RAISE)

    def test_empty_candidates_503(self, make_router):
        response = make_router().handle([], InboundRequest(prompt="hi"), ExhaustionPolicy.RETURN_503)
        assert json.loads(response["body"])["message"] == "Unknown error"
