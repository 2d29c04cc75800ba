class BrixError(Exception): ...


class IngestError(BrixError): ...


class RecordError(BrixError): ...


class SelectionError(BrixError): ...


class ConfigError(BrixError): ...


def require(condition: bool, message: str, exc: type[BrixError] = BrixError):
    """Raise the given exception if condition is False."""
    if not condition:
        raise exc(message)
