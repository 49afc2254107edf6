from pathlib import Path

import pandas as pd


def show_feature_importance(pipeline, num_features: int = 15, save_to=None) -> pd.Series:
    """Print (and optionally plot) the most important encoded features of a
    fitted preprocessing + XGBoost pipeline."""

    feature_names = pipeline[:-1].get_feature_names_out()
    importance = pd.Series(
        pipeline[-1].feature_importances_, index=feature_names
    ).sort_values(ascending=False)
    top = importance.head(num_features)

    print(f"Top {len(top)} features by importance:")
    print(top.to_string())

    if save_to is not None:
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        fig, ax = plt.subplots(figsize=(8, 6))
        top.iloc[::-1].plot.barh(ax=ax)
        ax.set_xlabel("Importance")
        ax.set_title("Feature importance")
        fig.tight_layout()
        fig.savefig(Path(save_to))
        plt.close(fig)

    return top
