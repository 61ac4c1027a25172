class PredictionError(Exception):
    """Base class for failures inside the forecasting engine."""


class InsufficientDataError(PredictionError):
    """Raised when a series is too short to fit two full seasons."""

    def __init__(self, message: str = "Too few data."):
        super().__init__(message)


class CatalogueLoadError(IOError):
    """Raised when neither the local cache nor the bundled snapshot can be read."""


class UnknownRegionError(KeyError):
    def __init__(self, name: str):
        super().__init__(f"Unknown region name: {name}")
        self.name = name

    def __str__(self):
        return self.args[0]
