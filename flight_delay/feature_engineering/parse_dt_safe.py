import sys

import numpy as np
import pandas as pd

# Most precise first, see parse_dt_safe
TIMESTAMP_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
)


def parse_dt_safe(values) -> pd.Series:
    """Parse a column of timestamps as UTC.

    The format is decided for the whole column at once: the full datetime
    format is tried first, and only when it fails on every value is the
    next, less precise format tried. Values that do not match the retained
    format become NaT. A column with values that match no format at all
    parses to NaT everywhere and a warning is printed on stderr.

    Args:
        values: sequence of timestamp strings ("T" separator and a trailing
            "Z" are accepted).

    Returns:
        pd.Series: tz-aware (UTC) datetimes, same index as ``values``.
    """

    values = pd.Series(values)
    text = (
        values.astype("string")
        .str.strip()
        .str.replace("T", " ", n=1, regex=False)
        .str.replace(r"Z$", "", regex=True)
    )
    text = text.astype(object).where(text.notna(), np.nan)

    for timestamp_format in TIMESTAMP_FORMATS:
        parsed = pd.to_datetime(text, format=timestamp_format, errors="coerce", utc=True)
        if parsed.notna().any():
            break
    else:
        if (text.fillna("") != "").any():
            print(
                f"Warning: no value of {values.name or 'the column'} matches any of {list(TIMESTAMP_FORMATS)}, "
                "all of them are treated as missing (fractional seconds and UTC offsets are not accepted).",
                file=sys.stderr,
            )
    return parsed
