class BaseCleaning(object):

    def __init__(self, **kwargs):
        self.kwargs = kwargs

    def __call__(self, FlightRecords):
        raise NotImplementedError
