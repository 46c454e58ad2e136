from typing import Optional

import numpy as np
import pandas as pd

from api.schemas import LabelCounts

MALICIOUS_RANGE = (0.65, 1.0)
BENIGN_RANGE = (0.05, 0.5)


def _uniform(rng: np.random.Generator, low: float, high: float, size: int) -> np.ndarray:
    # half-open [low, high); clamp the rare rounding onto `high`
    values = low + (high - low) * rng.random(size)
    return np.minimum(values, np.nextafter(high, low))


def generate_outcomes(counts: LabelCounts, rng: Optional[np.random.Generator] = None) -> pd.DataFrame:
    """
    Synthesize one (prediction, probability) pair per node.

    Exactly `counts.malicious` rows get prediction 1 with a probability in
    [0.65, 1.0), `counts.benign` rows get 0 with a probability in [0.05, 0.5).
    The sequence is shuffled so position says nothing about the label.
    """
    if rng is None:
        rng = np.random.default_rng()

    predictions = np.concatenate([
        np.ones(counts.malicious, dtype=int),
        np.zeros(counts.benign, dtype=int),
    ])
    probabilities = np.concatenate([
        _uniform(rng, *MALICIOUS_RANGE, counts.malicious),
        _uniform(rng, *BENIGN_RANGE, counts.benign),
    ])

    # Fisher-Yates over row positions
    order = rng.permutation(len(predictions))

    return pd.DataFrame({
        "prediction": predictions[order],
        "probability": probabilities[order],
    })
