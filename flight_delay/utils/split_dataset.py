import sys

import pandas as pd
from sklearn.model_selection import train_test_split


def make_strata(y, n_bins: int = 4, min_count: int = 2):
    """Quantile bins of a continuous target, usable as stratification labels.

    Returns None when the target cannot be binned into groups of at least
    ``min_count`` rows each.
    """

    y = pd.Series(y).reset_index(drop=True)
    if len(y) < n_bins * min_count or y.nunique() < 2:
        return None

    strata = pd.qcut(y, q=n_bins, labels=False, duplicates="drop")
    if strata.nunique() < 2 or strata.value_counts().min() < min_count:
        return None
    return strata.to_numpy()


def split_train_test(train_frac: float, X, y, seed: int = 0, n_bins: int = 4):
    """Stratified (on quantile bins of ``y``) train/test split.

    Returns:
        train_X, test_X, train_Y, test_Y
    """
    assert 0 < train_frac < 1

    strata = make_strata(y, n_bins=n_bins)
    # Every stratum needs a row on both sides
    if strata is not None and min(train_frac, 1 - train_frac) * len(strata) < len(set(strata)):
        strata = None
    if strata is None:
        print(
            "Warning: target too small to stratify the split. Falling back to a random split.",
            file=sys.stderr,
        )

    return train_test_split(
        X,
        y,
        train_size=train_frac,
        random_state=seed,
        stratify=strata,
    )
