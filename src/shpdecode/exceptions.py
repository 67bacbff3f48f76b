class GeoJSON_Error(Exception):
    pass


class ShapefileException(Exception):
    """An exception to handle shapefile specific problems."""


class ShapefileFormatError(ShapefileException):
    """The data does not follow the layout of the file format."""


class InvalidShapeTypeError(ShapefileFormatError):
    pass


class UnsupportedShapeTypeError(ShapefileException):
    """A shape type that the format defines but this package does not decode."""


class UnsupportedDBFError(ShapefileException):
    """A dBase variant (version, memo or .dbt flags) that is not decoded."""


class RingError(ShapefileFormatError):
    pass


class RingTooShortError(RingError):
    pass


class ZeroAreaRingError(RingError):
    pass


class ShapefileLimitError(ShapefileException):
    """A count or size exceeded a maximum configured by the caller."""


class ShapefileTruncatedError(ShapefileException):
    """The stream ended before an expected field was complete."""


class DBFFieldError(ShapefileException):
    """A single .dbf field value could not be decoded."""
