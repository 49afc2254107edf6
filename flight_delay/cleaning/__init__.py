from .AddArrivalDelay_v0_0_0 import AddArrivalDelay_v0_0_0
from .DropCancelledDiverted_v0_0_0 import DropCancelledDiverted_v0_0_0
