import json
from pathlib import Path

TRAIN_DATA_PATH = Path("data/flight_delays.csv")
UPCOMING_DATA_PATH = Path("data/upcoming_flights.csv")
PREDICTIONS_PATH = Path("data/predictions.csv")
MODEL_PATH = Path("models/arrival_delay_xgb_model.joblib")
RESULTS_DIR = Path("results")

TARGET_COLUMN = "arrival_delay_minutes"
PREDICTION_COLUMN = "predicted_delay_min"

SEED = 42
TRAIN_FRAC = 0.8

# [name, kwargs] pairs, names are resolved inside the matching flight_delay subpackage
DEFAULT_CONFIG = {
    "cleaning": [
        ["DropCancelledDiverted_v0_0_0", {}],
        ["AddArrivalDelay_v0_0_0", {}],
    ],
    "feature_engineering": [
        ["ScheduleFeatures_v0_0_0", {}],
    ],
    "model": [
        "XGBoost_lhs_v0_0_0",
        {
            "grid_size": 20,
            "n_folds": 5,
            "strata_bins": 4,
            "rare_threshold": 0.01,
            "seed": SEED,
        },
    ],
}


def read_config(path=None) -> dict:
    if path is None:
        return json.loads(json.dumps(DEFAULT_CONFIG))
    with open(path, "r") as fp:
        config = json.load(fp)
    for key in ("cleaning", "feature_engineering", "model"):
        if key not in config:
            raise ValueError(f"Config {path} has no {key!r} entry.")
    return config
