"""Offline evaluation of candidate Bedrock models.

Usage:
  python -m bedrock_router.evaluation
  python -m bedrock_router.evaluation --models amazon.nova-lite-v1:0 anthropic.claude-3-haiku-20240307-v1:0
  python -m bedrock_router.evaluation --output-dir /tmp/eval --strategy-out /tmp/eval/strategy.json

Each model answers each test case once. Results go to
<output-dir>/model_evaluation_results.csv and a per-model summary is printed.
The summary can also be turned into a ready-to-publish AppConfig strategy.
"""
from __future__ import annotations

import argparse
import csv
import json
import time
from dataclasses import asdict, fields
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .models import (
    EvaluationResult,
    InvokeResult,
    ModelScore,
    ModelSelectionStrategy,
    SummaryResult,
    TestCase,
)
from .providers import BedrockInvoker, UnsupportedModelPolicy
from .utils.logging_util import get_logger
from .utils.text_analysis import count_words, word_overlap_similarity

logger = get_logger(__name__)

# <root>/bedrock_router/evaluation.py -> parents[1] == <root>
CONFIG_DIR = Path(__file__).resolve().parents[1] / "config"
RESULTS_FILENAME = "model_evaluation_results.csv"

DEFAULT_MODELS = [
    "amazon.nova-lite-v1:0",
    "amazon.titan-text-express-v1",
]

DEFAULT_TEST_CASES = [
    TestCase(
        question="What is a 401(k) retirement plan?",
        context="Financial services",
        ground_truth="A 401(k) is a tax-advantaged retirement savings plan offered by employers.",
    ),
]

EVAL_MAX_TOKENS = 500
QUALITY_WEIGHT = 0.7
LATENCY_WEIGHT = 0.3


def build_prompt(case: TestCase) -> str:
    return f"Question: {case.question}\nContext: {case.context}"


def invoke_model(
    invoker: BedrockInvoker,
    model_id: str,
    prompt: str,
    max_tokens: int = EVAL_MAX_TOKENS,
) -> InvokeResult:
    """One timed call. Failures are captured in the result, never raised."""
    start = time.perf_counter()
    try:
        output = invoker.invoke(model_id, prompt, max_tokens)
    except Exception as e:
        logger.error("Model invocation failed for %s: %s", model_id, e)
        return InvokeResult(success=False, error=str(e), latency=time.perf_counter() - start)

    return InvokeResult(
        success=True,
        output=output,
        latency=time.perf_counter() - start,
        token_count=count_words(output),
    )


def evaluate_models(
    invoker: BedrockInvoker,
    models: Sequence[str] = DEFAULT_MODELS,
    test_cases: Sequence[TestCase] = DEFAULT_TEST_CASES,
) -> List[EvaluationResult]:
    results: List[EvaluationResult] = []

    for case in test_cases:
        prompt = build_prompt(case)
        for model_id in models:
            logger.info("Evaluating %s on: %s", model_id, case.question)
            response = invoke_model(invoker, model_id, prompt)

            if response.success and response.output:
                results.append(
                    EvaluationResult(
                        model_id=model_id,
                        question=case.question,
                        output=response.output,
                        latency=response.latency,
                        token_count=response.token_count,
                        similarity_score=word_overlap_similarity(response.output, case.ground_truth),
                    )
                )
            else:
                results.append(
                    EvaluationResult(
                        model_id=model_id,
                        question=case.question,
                        error=response.error,
                        latency=response.latency,
                    )
                )

    return results


def write_results_csv(results: Iterable[EvaluationResult], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    columns = [f.name for f in fields(EvaluationResult)]
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=columns)
        writer.writeheader()
        for result in results:
            row = result.to_row()
            writer.writerow({k: "" if v is None else v for k, v in row.items()})
    return path


def calculate_summary(results: Sequence[EvaluationResult]) -> List[SummaryResult]:
    grouped: Dict[str, List[EvaluationResult]] = {}
    for r in results:
        grouped.setdefault(r.model_id, []).append(r)

    summary: List[SummaryResult] = []
    for model_id, rows in grouped.items():
        scored = [r.similarity_score for r in rows if r.similarity_score is not None]
        counted = [r.token_count for r in rows if r.token_count is not None]
        summary.append(
            SummaryResult(
                model_id=model_id,
                avg_latency=sum(r.latency for r in rows) / len(rows),
                avg_similarity_score=sum(scored) / len(scored) if scored else 0.0,
                avg_token_count=sum(counted) / len(counted) if counted else 0.0,
            )
        )
    return summary


def score_models(summary: Sequence[SummaryResult]) -> List[ModelScore]:
    """
    Weighted score per model, best first. latency_score is min-max scaled so
    the fastest model gets 1.0 and the slowest 0.0.
    """
    if not summary:
        return []

    latencies = [s.avg_latency for s in summary]
    fastest, slowest = min(latencies), max(latencies)
    spread = slowest - fastest

    scores = []
    for s in summary:
        latency_score = 1.0 if spread == 0 else (slowest - s.avg_latency) / spread
        scores.append(
            ModelScore(
                model_id=s.model_id,
                latency=s.avg_latency,
                similarity_score=s.avg_similarity_score,
                latency_score=latency_score,
                overall_score=QUALITY_WEIGHT * s.avg_similarity_score + LATENCY_WEIGHT * latency_score,
            )
        )
    scores.sort(key=lambda m: m.overall_score, reverse=True)
    return scores


def build_selection_strategy(
    summary: Sequence[SummaryResult],
) -> Tuple[Optional[ModelSelectionStrategy], List[ModelScore]]:
    scores = score_models(summary)
    if not scores:
        return None, scores
    strategy = ModelSelectionStrategy(
        primary_model=scores[0].model_id,
        fallback_models=[s.model_id for s in scores[1:]],
    )
    return strategy, scores


def write_strategy(strategy: ModelSelectionStrategy, scores: Sequence[ModelScore], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    doc = {
        "primary_model": strategy.primary_model,
        "fallback_models": strategy.fallback_models,
        "model_scores": [asdict(s) for s in scores],
    }
    path.write_text(json.dumps(doc, indent=2), encoding="utf-8")
    return path


def format_summary(summary: Sequence[SummaryResult]) -> str:
    headers = ["model_id", "avg_latency", "avg_similarity_score", "avg_token_count"]
    rows = [
        [
            s.model_id,
            f"{s.avg_latency:.3f}",
            f"{s.avg_similarity_score:.3f}",
            f"{s.avg_token_count:.1f}",
        ]
        for s in summary
    ]
    widths = [max([len(h)] + [len(r[i]) for r in rows]) for i, h in enumerate(headers)]

    def line(cells):
        return " | ".join(c.ljust(w) for c, w in zip(cells, widths))

    out = [line(headers), "-+-".join("-" * w for w in widths)]
    out.extend(line(r) for r in rows)
    return "\n".join(out)


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Evaluate Bedrock models against ground-truth answers")
    ap.add_argument("--models", nargs="+", default=DEFAULT_MODELS, help="Bedrock model ids")
    ap.add_argument("--output-dir", type=Path, default=CONFIG_DIR, help="Where the CSV is written")
    ap.add_argument("--strategy-out", type=Path, help="Also write a recommended AppConfig strategy here")
    ap.add_argument("--region", help="AWS region for bedrock-runtime")
    args = ap.parse_args(argv)

    invoker = BedrockInvoker(policy=UnsupportedModelPolicy.PERMISSIVE, region_name=args.region)
    results = evaluate_models(invoker, args.models)

    csv_path = write_results_csv(results, args.output_dir / RESULTS_FILENAME)
    logger.info("Wrote %d results to %s", len(results), csv_path)

    summary = calculate_summary(results)
    print("\nEvaluation Summary:")
    print(format_summary(summary))

    if args.strategy_out:
        strategy, scores = build_selection_strategy(summary)
        if strategy is not None:
            write_strategy(strategy, scores, args.strategy_out)
            logger.info("Recommended primary model: %s", strategy.primary_model)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
