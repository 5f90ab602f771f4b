class PriceDataError(Exception):
    """Base class for failures that prevent the dashboard from rendering."""


class PriceFetchError(PriceDataError):
    """Network failure or non-success HTTP status from the price API."""


class EmptyPriceDataError(PriceDataError):
    """Payload was malformed or carried no price samples."""

    def __init__(self, message: str = "No price data available") -> None:
        super().__init__(message)
