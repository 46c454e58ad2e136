import math

import pandas as pd

from api.schemas import Statistics

HIGH_RISK_THRESHOLD = 0.7
LOW_RISK_THRESHOLD = 0.3


def risk_level(probability: float) -> str:
    if probability > HIGH_RISK_THRESHOLD:
        return "High"
    if probability > LOW_RISK_THRESHOLD:
        return "Medium"
    return "Low"


def _percentage(count: int, total: int) -> float:
    if total == 0:
        return 0.0
    return round(count / total * 100, 2)


def aggregate(outcomes: pd.DataFrame) -> Statistics:
    """
    Reduce per-node outcomes (prediction, probability) into summary metrics.
    Order of rows does not matter; an empty frame yields all zeros.
    """
    total = len(outcomes)
    predictions = outcomes["prediction"] if total else pd.Series(dtype=int)
    probabilities = outcomes["probability"] if total else pd.Series(dtype=float)

    malicious = int((predictions == 1).sum())
    benign = total - malicious

    # fsum keeps the average independent of row order
    average = round(math.fsum(probabilities) / total, 4) if total else 0.0

    return Statistics(
        total_samples=total,
        benign_nodes=benign,
        malicious_nodes=malicious,
        benign_percentage=_percentage(benign, total),
        malicious_percentage=_percentage(malicious, total),
        average_risk_score=average,
        high_risk_nodes=int((probabilities > HIGH_RISK_THRESHOLD).sum()),
        low_risk_nodes=int((probabilities < LOW_RISK_THRESHOLD).sum()),
    )
