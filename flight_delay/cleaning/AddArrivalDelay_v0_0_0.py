from ..config import TARGET_COLUMN
from ..feature_engineering.parse_dt_safe import parse_dt_safe
from .BaseCleaning import BaseCleaning


class AddArrivalDelay_v0_0_0(BaseCleaning):
    """Adds the signed arrival delay in minutes (actual minus scheduled arrival)
    and drops the flights where it cannot be computed."""

    def __init__(self, target=TARGET_COLUMN):
        self.target = target

    def __call__(self, FlightRecords):

        scheduled_arrival = parse_dt_safe(FlightRecords["ScheduledArrival"])
        actual_arrival = parse_dt_safe(FlightRecords["ActualArrival"])

        FlightRecords = FlightRecords.assign(
            **{self.target: (actual_arrival - scheduled_arrival).dt.total_seconds() / 60}
        )
        missing = FlightRecords[self.target].isna()
        if missing.any():
            print(f"[AddArrivalDelay] Dropping {int(missing.sum())} flights without a computable delay.")

        return FlightRecords[~missing]
