from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple

import joblib
import pandas as pd

from ..exceptions import MissingArtifactError


@dataclass(frozen=True)
class ArrivalDelayArtifact:
    """Everything inference needs, fitted once at training time.

    ``feature_engineering`` holds the very step objects used during training
    so both pipelines derive features identically; ``pipeline`` is the fitted
    preprocessing (imputation statistics, OTHER pooling table, one-hot
    encoding, zero variance filter) followed by the fitted regressor.
    """

    feature_engineering: Tuple
    column_functions: Dict[str, List[str]]
    pipeline: object

    def features(self, FlightRecords: pd.DataFrame) -> pd.DataFrame:
        for feature_engineering_step in self.feature_engineering:
            FlightRecords, _ = feature_engineering_step(
                FlightRecords, self.column_functions
            )
        return FlightRecords

    def predict(self, FlightRecords: pd.DataFrame):
        return self.pipeline.predict(self.features(FlightRecords))


def save_artifact(artifact: ArrivalDelayArtifact, path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    joblib.dump(artifact, path)
    return path


def load_artifact(path) -> ArrivalDelayArtifact:
    path = Path(path)
    if not path.exists():
        raise MissingArtifactError(
            f"Trained model not found at {path}. Run scripts/train_model.py first."
        )
    return joblib.load(path)
