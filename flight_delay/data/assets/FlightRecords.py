from pathlib import Path

import pandas as pd

from ...config import TRAIN_DATA_PATH, UPCOMING_DATA_PATH

TIMESTAMP_COLUMNS = ("ScheduledDeparture", "ScheduledArrival", "ActualArrival")
CATEGORICAL_COLUMNS = ("Airline", "Origin", "Destination", "AircraftType")

REQUIRED_COLUMNS = {
    "train": [
        "ScheduledDeparture",
        "ScheduledArrival",
        "ActualArrival",
        "Airline",
        "Origin",
        "Destination",
        "AircraftType",
        "Distance",
        "Cancelled",
        "Diverted",
    ],
    "upcoming": [
        "ScheduledDeparture",
        "ScheduledArrival",
        "Airline",
        "Origin",
        "Destination",
        "AircraftType",
        "Distance",
    ],
}


def get_FlightRecords(variant: str, path=None) -> pd.DataFrame:
    """Load flight records from CSV.

    Args:
        variant (str): "train" for historical flights with outcomes,
            "upcoming" for flights that have not flown yet.
        path: CSV location, defaults to the fixed path of the variant.

    Timestamps are read as "YYYY-MM-DD HH:MM:SS", "YYYY-MM-DD HH:MM" or
    "YYYY-MM-DD" (UTC, "T" separator and trailing "Z" allowed); fractional
    seconds and UTC offsets are not supported.

    Returns:
        pd.DataFrame: the records, in file order.
    """

    assert variant in ("train", "upcoming")

    if path is None:
        path = TRAIN_DATA_PATH if variant == "train" else UPCOMING_DATA_PATH

    # Timestamps and category codes are kept as text, so a code such as 320 reads
    # the same whether or not the file has blanks in that column
    asset = pd.read_csv(
        Path(path).expanduser(),
        dtype={
            column: str
            for column in REQUIRED_COLUMNS[variant]
            if column in TIMESTAMP_COLUMNS + CATEGORICAL_COLUMNS
        },
    )

    missing_columns = [
        column for column in REQUIRED_COLUMNS[variant] if column not in asset.columns
    ]
    if len(missing_columns) > 0:
        raise ValueError(f"{path} is missing the columns {missing_columns}.")

    return asset
