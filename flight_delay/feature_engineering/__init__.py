from .parse_dt_safe import parse_dt_safe
from .ScheduleFeatures_v0_0_0 import (
    FEATURES,
    ScheduleFeatures_v0_0_0,
    derive_schedule_features,
)
