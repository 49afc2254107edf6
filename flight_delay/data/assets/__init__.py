from .FlightRecords import get_FlightRecords
