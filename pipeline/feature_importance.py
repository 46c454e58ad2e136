from typing import List

from api.schemas import FeatureImportance

# Blockchain node telemetry features, strongest first.
BASE_FEATURE_IMPORTANCE = [
    ("downtime_percent", 0.0967),
    ("node_latency", 0.0918),
    ("stake_distribution_rate", 0.0868),
    ("coin_age", 0.0818),
    ("stake_reward", 0.0694),
    ("stake_amount", 0.0620),
    ("block_generation_rate", 0.0587),
]

FEATURE_NAMES = [name for name, _ in BASE_FEATURE_IMPORTANCE]

# rank -> bump applied to imbalanced datasets
IMBALANCED_BOOST = {1: 0.01, 2: 0.008}


def synthesize_feature_importance(file_name: str) -> List[FeatureImportance]:
    """
    Ranked feature importances for a file analysed without the backend.

    Files whose name contains "imbalanced" get the top two features nudged up.
    Ranks are NOT recomputed after the nudge; the base table gap between rank 2
    and rank 3 is wide enough that order still holds.
    """
    imbalanced = "imbalanced" in file_name

    features = []
    for rank, (name, importance) in enumerate(BASE_FEATURE_IMPORTANCE, start=1):
        if imbalanced:
            importance = round(importance + IMBALANCED_BOOST.get(rank, 0.0), 4)
        features.append(FeatureImportance(feature=name, importance=importance, rank=rank))

    return features
