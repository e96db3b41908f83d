"""Prometheus metrics for monitoring score distribution, penalties, and harness failures"""

from prometheus_client import REGISTRY, Counter, Histogram, write_to_textfile

from vibescore_income.domain.models import ScoreResult

# Score metrics
score_counter = Counter(
    "income_score_total",
    "Total income scores computed",
    ["segment"],  # youth | adult
)

score_histogram = Histogram(
    "income_score_value",
    "Distribution of final income scores",
    buckets=[10, 20, 30, 40, 50, 60, 70, 80, 90, 100],
)

penalty_item_counter = Counter(
    "income_penalty_items_total",
    "Penalty items triggered",
    ["penalty_id"],
)

# Harness metrics
payload_failure_counter = Counter(
    "income_payload_failures_total",
    "Harness payloads that could not be decoded",
)


def record_score(result: ScoreResult) -> None:
    """Record score metrics for monitoring segment mix and penalty frequency"""
    score_counter.labels(segment=result.demographics.segment).inc()
    score_histogram.observe(result.score)

    for item in result.penalty.items:
        penalty_item_counter.labels(penalty_id=item.id).inc()


def record_payload_failure() -> None:
    payload_failure_counter.inc()


def export_metrics(path: str) -> None:
    """Write the default registry in text exposition format for a node-exporter textfile collector"""
    write_to_textfile(path, REGISTRY)
