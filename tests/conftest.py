import numpy as np
import pandas as pd
import pytest


def make_flights(n=200, seed=0):
    rng = np.random.default_rng(seed)
    departure = pd.Timestamp("2024-01-01 05:00:00") + pd.to_timedelta(
        rng.integers(0, 60 * 24 * 300, size=n), unit="min"
    )
    block = rng.integers(45, 400, size=n)
    arrival = departure + pd.to_timedelta(block, unit="min")
    airline = rng.choice(["AA", "DL", "UA"], size=n)
    delay = (
        rng.normal(5, 10, size=n)
        + np.where(airline == "UA", 20, 0)
        + (departure.hour.to_numpy() > 17) * 15
    ).round()
    actual = arrival + pd.to_timedelta(delay, unit="min")

    return pd.DataFrame(
        {
            "FlightNumber": [f"FL{i:04d}" for i in range(n)],
            "ScheduledDeparture": departure.strftime("%Y-%m-%d %H:%M:%S"),
            "ScheduledArrival": arrival.strftime("%Y-%m-%d %H:%M:%S"),
            "ActualArrival": actual.strftime("%Y-%m-%d %H:%M:%S"),
            "Airline": airline,
            "Origin": rng.choice(["JFK", "LAX", "ORD", "ATL"], size=n),
            "Destination": rng.choice(["SFO", "SEA", "BOS", "MIA"], size=n),
            "AircraftType": rng.choice(["A320", "B738", "E175"], size=n),
            "Distance": block * 8.0,
            "Cancelled": False,
            "Diverted": False,
        }
    )


@pytest.fixture
def flights():
    return make_flights()


@pytest.fixture
def small_config():
    return {
        "cleaning": [
            ["DropCancelledDiverted_v0_0_0", {}],
            ["AddArrivalDelay_v0_0_0", {}],
        ],
        "feature_engineering": [["ScheduleFeatures_v0_0_0", {}]],
        "model": [
            "XGBoost_lhs_v0_0_0",
            {"grid_size": 2, "n_folds": 3, "seed": 42, "n_jobs": 1},
        ],
    }
