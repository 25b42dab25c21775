"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidRangeError(DomainException):
    """Range bounds are inverted (end before start, min above max)"""

    pass


class InvalidAmountError(DomainException):
    """A financial input is negative"""

    pass


class UnsupportedDimensionError(DomainException):
    """Aggregation dimension or time granularity is not recognised"""

    pass


class BackendAPIError(DomainException):
    """Dashboard backend returned an error or is unavailable"""

    pass


class ApplicationNotFoundError(DomainException):
    """No application with the requested id"""

    pass


class InvalidCategoryError(DomainException):
    """Status filter names no canonical category"""

    pass
