class BaseFeatureEngineering(object):

    def __init__(self, **kwargs):
        self.kwargs = kwargs

    def __call__(self, FlightRecords, column_functions):
        raise NotImplementedError
