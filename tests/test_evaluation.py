"""Tests for the offline model evaluation script."""

import csv
import json

import pytest

from bedrock_router import evaluation
from bedrock_router.models import EvaluationResult, SummaryResult, TestCase
from bedrock_router.providers import BedrockInvoker, UnsupportedModelPolicy
from bedrock_router.utils.text_analysis import count_words, word_overlap_similarity
from tests.helpers.aws_fakes import NOVA_MODEL, TITAN_MODEL, FakeBedrockRuntime, nova_body

CASE = TestCase(
    question="What is a 401(k) retirement plan?",
    context="Financial services",
    ground_truth="A 401(k) is a retirement plan",
)


@pytest.fixture
def eval_invoker():
    runtime = FakeBedrockRuntime(
        {
            NOVA_MODEL: nova_body("A 401(k) is an employer retirement plan"),
            "cohere.command-text-v14": {"output": "plan"},
        }
    )
    return BedrockInvoker(client=runtime, policy=UnsupportedModelPolicy.PERMISSIVE)


class TestTextAnalysis:

    def test_similarity(self):
        assert word_overlap_similarity("a B c", "a b d e") == 0.5
        assert word_overlap_similarity("anything", "") == 0.0
        assert word_overlap_similarity("", "a b") == 0.0

    def test_count_words(self):
        assert count_words("one  two\nthree") == 3


class TestEvaluateModels:

    def test_success_and_error_rows(self, eval_invoker):
        results = evaluation.evaluate_models(eval_invoker, [NOVA_MODEL, TITAN_MODEL], [CASE])

        assert [r.model_id for r in results] == [NOVA_MODEL, TITAN_MODEL]
        ok, failed = results

        assert ok.output == "A 401(k) is an employer retirement plan"
        assert ok.token_count == 7
        assert ok.similarity_score == pytest.approx(1.0)
        assert ok.error is None

        assert failed.output is None
        assert failed.similarity_score is None
        assert "Rate exceeded" in failed.error
        assert failed.latency >= 0

    def test_prompt_format(self, eval_invoker):
        evaluation.evaluate_models(eval_invoker, [NOVA_MODEL], [CASE])
        body = eval_invoker.runtime.sent_body()
        assert body["messages"][0]["content"][0]["text"] == (
            "Question: What is a 401(k) retirement plan?\nContext: Financial services"
        )
        assert body["inferenceConfig"]["max_new_tokens"] == 500

    def test_unknown_family_uses_generic_body(self, eval_invoker):
        results = evaluation.evaluate_models(eval_invoker, ["cohere.command-text-v14"], [CASE])
        assert results[0].output == "plan"
        assert eval_invoker.runtime.sent_body() == {"prompt": evaluation.build_prompt(CASE)}


class TestReporting:

    def test_csv_columns_and_empty_values(self, tmp_path):
        results = [
            EvaluationResult(model_id="m1", question="q, with comma", latency=0.5, error="boom"),
            EvaluationResult(
                model_id="m2", question="q", latency=1.0, output="x", token_count=1, similarity_score=0.25
            ),
        ]

        path = evaluation.write_results_csv(results, tmp_path / "out" / "results.csv")

        with open(path, newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
        assert list(rows[0].keys()) == [
            "model_id", "question", "latency", "output", "error", "token_count", "similarity_score",
        ]
        assert rows[0]["question"] == "q, with comma"
        assert rows[0]["output"] == ""
        assert rows[1]["similarity_score"] == "0.25"

    def test_summary_averages(self):
        results = [
            EvaluationResult(model_id="m1", question="q1", latency=1.0, output="a", token_count=4, similarity_score=0.5),
            EvaluationResult(model_id="m1", question="q2", latency=3.0, error="boom"),
            EvaluationResult(model_id="m2", question="q1", latency=2.0, error="boom"),
        ]

        summary = {s.model_id: s for s in evaluation.calculate_summary(results)}

        assert summary["m1"].avg_latency == pytest.approx(2.0)
        assert summary["m1"].avg_similarity_score == pytest.approx(0.5)
        assert summary["m1"].avg_token_count == pytest.approx(4.0)
        assert summary["m2"].avg_similarity_score == 0.0
        assert summary["m2"].avg_token_count == 0.0

    def test_format_summary(self):
        table = evaluation.format_summary([SummaryResult("m1", 1.23456, 0.5, 10)])
        assert "model_id" in table.splitlines()[0]
        assert "1.235" in table
        assert evaluation.format_summary([]).startswith("model_id")


class TestSelectionStrategy:

    def test_scores_and_order(self):
        summary = [
            SummaryResult("slow-accurate", avg_latency=4.0, avg_similarity_score=0.9, avg_token_count=50),
            SummaryResult("fast-sloppy", avg_latency=1.0, avg_similarity_score=0.2, avg_token_count=20),
        ]

        strategy, scores = evaluation.build_selection_strategy(summary)

        assert strategy.primary_model == "slow-accurate"
        assert strategy.fallback_models == ["fast-sloppy"]
        by_id = {s.model_id: s for s in scores}
        assert by_id["fast-sloppy"].latency_score == 1.0
        assert by_id["slow-accurate"].latency_score == 0.0
        assert by_id["slow-accurate"].overall_score == pytest.approx(0.63)
        assert by_id["fast-sloppy"].overall_score == pytest.approx(0.44)

    def test_equal_latency(self):
        _, scores = evaluation.build_selection_strategy([SummaryResult("m", 1.0, 0.0, 0.0)])
        assert scores[0].latency_score == 1.0

    def test_empty(self):
        assert evaluation.build_selection_strategy([]) == (None, [])

    def test_write_strategy(self, tmp_path):
        strategy, scores = evaluation.build_selection_strategy([SummaryResult("m", 1.0, 0.5, 3.0)])
        path = evaluation.write_strategy(strategy, scores, tmp_path / "strategy.json")

        doc = json.loads(path.read_text(encoding="utf-8"))
        assert doc["primary_model"] == "m"
        assert doc["fallback_models"] == []
        assert doc["model_scores"][0]["overall_score"] == pytest.approx(0.65)


def test_main_writes_csv_and_strategy(tmp_path, monkeypatch, capsys):
    runtime = FakeBedrockRuntime({NOVA_MODEL: nova_body("A 401(k) is a tax-advantaged plan")})
    monkeypatch.setattr(
        evaluation,
        "BedrockInvoker",
        lambda policy, region_name: BedrockInvoker(client=runtime, policy=policy),
    )

    code = evaluation.main(
        ["--models", NOVA_MODEL, "--output-dir", str(tmp_path), "--strategy-out", str(tmp_path / "s.json")]
    )

    assert code == 0
    assert (tmp_path / "model_evaluation_results.csv").exists()
    assert json.loads((tmp_path / "s.json").read_text())["primary_model"] == NOVA_MODEL
    assert "Evaluation Summary:" in capsys.readouterr().out
