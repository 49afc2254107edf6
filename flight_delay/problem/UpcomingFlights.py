from pathlib import Path

import numpy as np
import pandas as pd

from ..config import MODEL_PATH, PREDICTIONS_PATH, PREDICTION_COLUMN
from ..data.assets import get_FlightRecords
from ..model import load_artifact


class UpcomingFlights(object):
    """Inference side: predicted arrival delay of flights that have not flown yet."""

    def __init__(self, data_path=None, FlightRecords=None):
        self.data_path = data_path
        self.FlightRecords = FlightRecords

    def predict_with(self, model_path=MODEL_PATH, output_path=PREDICTIONS_PATH) -> pd.DataFrame:

        # Checked before touching the flights so nothing is written without a model
        artifact = load_artifact(model_path)
        print(f"Loaded trained model from {model_path}")

        FlightRecords = self.FlightRecords
        if FlightRecords is None:
            print("Loading upcoming flights...")
            FlightRecords = get_FlightRecords(variant="upcoming", path=self.data_path)
        print(f"Loaded {len(FlightRecords)} flights.")

        if len(FlightRecords) == 0:
            y_pred = np.array([], dtype=float)
        else:
            y_pred = artifact.predict(FlightRecords)

        result = FlightRecords.assign(
            **{PREDICTION_COLUMN: np.rint(np.asarray(y_pred, dtype=float)).astype("int64")}
        )

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        result.to_csv(output_path, index=False)

        print(result)
        print(f"Predictions saved to {output_path}")

        return result
