class MountainError(Exception):
    """Base class for terrain engine failures."""


class InvalidConfig(MountainError, ValueError):
    """Raised for unknown scale modes, seasons or missing season palettes."""


class InvalidPalette(MountainError, ValueError):
    """Raised when a palette has no color stops."""


class InvalidColor(MountainError, ValueError):
    """Raised when a color value cannot be parsed or is out of range."""


class MissingData(MountainError):
    """Reserved for absent calendar data.

    Short or sparse weeks never raise this; missing cells read as height 0.
    """


class InvalidActivity(MountainError, ValueError):
    """Raised when a calendar day has a negative count or a bad weekday."""
