import pandas as pd

from .BaseCleaning import BaseCleaning

TRUE_VALUES = {"true", "t", "yes", "y", "1", "1.0"}
FALSE_VALUES = {"false", "f", "no", "n", "0", "0.0"}


def as_flag(column: pd.Series) -> pd.Series:
    """Read a boolean column written as bools, 0/1 or text. Unknown values are NA."""

    def to_flag(value):
        if pd.isna(value):
            return pd.NA
        text = str(value).strip().lower()
        if text in TRUE_VALUES:
            return True
        if text in FALSE_VALUES:
            return False
        return pd.NA

    return column.map(to_flag).astype("boolean")


class DropCancelledDiverted_v0_0_0(BaseCleaning):
    """Keeps only the flights that were neither cancelled nor diverted.

    A row whose flag is missing or unreadable is dropped as well, since it
    cannot be shown to have operated normally.
    """

    def __init__(self, columns=("Cancelled", "Diverted")):
        self.columns = list(columns)

    def __call__(self, FlightRecords):

        keep = pd.Series(True, index=FlightRecords.index)
        for column in self.columns:
            keep &= as_flag(FlightRecords[column]).eq(False).fillna(False).astype(bool)

        print(
            f"[DropCancelledDiverted] Dropping {int((~keep).sum())} of {len(FlightRecords)} flights."
        )
        return FlightRecords[keep]
