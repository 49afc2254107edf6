import numpy as np
import pandas as pd

from .BaseFeatureEngineering import BaseFeatureEngineering
from .parse_dt_safe import parse_dt_safe

CATEGORICAL_FEATURES = ["Airline", "Origin", "Destination", "AircraftType"]
NUMERICAL_FEATURES = [
    "Distance",
    "dep_hour",
    "dep_min",
    "dep_wday",
    "dep_month",
    "sched_block_min",
]
FEATURES = [
    "Airline",
    "Origin",
    "Destination",
    "Distance",
    "AircraftType",
    "dep_hour",
    "dep_min",
    "dep_wday",
    "dep_month",
    "sched_block_min",
]


def _as_nominal(column: pd.Series) -> pd.Series:
    # Labels as plain strings, missing values stay NaN for the mode imputer
    def to_label(value):
        # 320.0 (an integer code upcast by a blank) is the level "320"
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)

    return column.map(to_label, na_action="ignore").where(column.notna(), np.nan).astype(object)


def derive_schedule_features(FlightRecords: pd.DataFrame) -> pd.DataFrame:
    """Build the model-ready feature rows out of raw flight records.

    Only the two scheduled timestamps are read, so the output never
    depends on the flight outcome. The input frame is left untouched.

    Returns:
        pd.DataFrame: columns FEATURES in that order, same index as the input.
    """

    departure = parse_dt_safe(FlightRecords["ScheduledDeparture"])
    arrival = parse_dt_safe(FlightRecords["ScheduledArrival"])

    features = pd.DataFrame(index=FlightRecords.index)
    for column in CATEGORICAL_FEATURES:
        features[column] = _as_nominal(FlightRecords[column])
    features["Distance"] = pd.to_numeric(FlightRecords["Distance"], errors="coerce")
    features["dep_hour"] = departure.dt.hour.astype(float)
    features["dep_min"] = departure.dt.minute.astype(float)
    # ISO weekday, Monday=1
    features["dep_wday"] = (departure.dt.dayofweek + 1).astype(float)
    features["dep_month"] = departure.dt.month.astype(float)
    features["sched_block_min"] = (arrival - departure).dt.total_seconds() / 60

    return features[FEATURES]


class ScheduleFeatures_v0_0_0(BaseFeatureEngineering):
    """Calendar and block-time features from the scheduled timestamps."""

    def __call__(self, FlightRecords, column_functions):

        FlightRecords = derive_schedule_features(FlightRecords)

        column_functions = {
            feature_type: [column for column in columns if column in FlightRecords.columns]
            for feature_type, columns in column_functions.items()
        }
        column_functions["numerical"] = list(NUMERICAL_FEATURES)
        column_functions["categorical"] = list(CATEGORICAL_FEATURES)

        return FlightRecords, column_functions
