from .ArrivalDelay import ArrivalDelay
from .UpcomingFlights import UpcomingFlights
