from typing import Optional

from mltestor import config
from mltestor.schemas.prediction import ClassificationOutcome, ClassificationResult


def describe(result: ClassificationResult) -> str:
    # e.g. "  (0.37) cliff, drop, drop-off"
    return "  (%.2f) %s" % (result.confidence, result.label)


def format_outcome(outcome: ClassificationOutcome, top_k: Optional[int] = None) -> str:
    """Build the result label text for a finished inference request."""
    if outcome.failed:
        return config.FAILURE_MARKER

    if not outcome.observations:
        return config.NOTHING_RECOGNIZED

    top_k = config.TOP_K if top_k is None else top_k
    descriptions = [describe(result) for result in outcome.observations[:top_k]]
    return config.RESULT_HEADER + "\n" + "\n".join(descriptions)
