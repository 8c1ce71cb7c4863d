"""Exception types raised while talking to the control socket."""


class ControlSocketError(OSError):
    """Connecting, writing or reading the header from the control socket failed."""


class UnsupportedCommandError(ValueError):
    """Command cannot be issued through a command session."""


class StatParseError(ValueError):
    """A STATS line could not be parsed into a record."""


class InsufficientFieldsError(StatParseError):
    """Fewer than six `;`-delimited fields."""


class InvalidObjectTypeError(StatParseError):
    """Object type is too short to classify."""


class InvalidValueError(StatParseError):
    """Value field is not a floating-point number."""
