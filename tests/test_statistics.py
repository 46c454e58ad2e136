import math

import numpy as np
import pandas as pd
import pytest

from api.schemas import LabelCounts
from pipeline.outcome_generator import generate_outcomes
from pipeline.statistics import aggregate, risk_level


def _frame(pairs):
    return pd.DataFrame(pairs, columns=["prediction", "probability"])


def test_hand_computed_example():
    stats = aggregate(_frame([(1, 0.9), (1, 0.7), (0, 0.3), (0, 0.1)]))

    assert stats.total_samples == 4
    assert stats.malicious_nodes == 2
    assert stats.benign_nodes == 2
    assert stats.benign_percentage == 50.0
    assert stats.malicious_percentage == 50.0
    assert stats.average_risk_score == 0.5
    # thresholds are exclusive: 0.7 is not high, 0.3 is not low
    assert stats.high_risk_nodes == 1
    assert stats.low_risk_nodes == 1


def test_percentages_round_to_two_decimals():
    stats = aggregate(_frame([(1, 0.8), (0, 0.2), (0, 0.2)]))
    assert stats.malicious_percentage == 33.33
    assert stats.benign_percentage == 66.67


def test_empty_input_has_no_nan():
    stats = aggregate(_frame([]))

    assert stats.total_samples == 0
    for value in stats.model_dump().values():
        assert value == 0
        assert not (isinstance(value, float) and math.isnan(value))


@pytest.mark.parametrize("benign,malicious", [(30, 10), (1, 2), (997, 3), (0, 13), (200, 0)])
def test_percentages_sum_to_hundred(benign, malicious):
    out = generate_outcomes(LabelCounts(benign=benign, malicious=malicious), rng=np.random.default_rng(3))
    stats = aggregate(out)
    assert abs(stats.benign_percentage + stats.malicious_percentage - 100) <= 0.01


def test_aggregate_is_shuffle_invariant(rng):
    out = generate_outcomes(LabelCounts(benign=140, malicious=60), rng=rng)
    baseline = aggregate(out)

    for seed in range(5):
        shuffled = out.sample(frac=1, random_state=seed).reset_index(drop=True)
        assert aggregate(shuffled) == baseline


@pytest.mark.parametrize("p,level", [(0.71, "High"), (0.7, "Medium"), (0.31, "Medium"), (0.3, "Low"), (0.05, "Low")])
def test_risk_level_buckets(p, level):
    assert risk_level(p) == level
