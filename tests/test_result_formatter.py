from __future__ import annotations

from mltestor.schemas.prediction import ClassificationOutcome, ClassificationResult
from mltestor.utils.result_formatter import describe, format_outcome


def _results(*pairs):
    return [ClassificationResult(label=label, confidence=conf) for label, conf in pairs]


def test_describe_uses_two_decimals() -> None:
    result = ClassificationResult(label="cliff, drop, drop-off", confidence=0.3749)
    assert describe(result) == "  (0.37) cliff, drop, drop-off"


def test_top_two_only() -> None:
    outcome = ClassificationOutcome(
        observations=_results(("tabby cat", 0.91), ("tiger cat", 0.05), ("lynx", 0.02))
    )
    assert format_outcome(outcome) == (
        "Classification Result:\n  (0.91) tabby cat\n  (0.05) tiger cat"
    )


def test_single_observation() -> None:
    outcome = ClassificationOutcome(observations=_results(("lynx", 1.0)))
    assert format_outcome(outcome) == "Classification Result:\n  (1.00) lynx"


def test_custom_top_k() -> None:
    outcome = ClassificationOutcome(observations=_results(("a", 0.5), ("b", 0.3), ("c", 0.2)))
    assert format_outcome(outcome, top_k=3).count("\n") == 3


def test_nothing_recognized_is_distinct_from_failure() -> None:
    assert format_outcome(ClassificationOutcome(observations=[])) == "Nothing recognized."
    assert format_outcome(ClassificationOutcome(error="boom")) == "KO........"
