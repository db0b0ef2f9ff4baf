"""
Pricolor Errors
Exception taxonomy shared by the preprocessor, the picker and the front-ends.
"""


class PricolorError(Exception):
    """Base class for all pricolor errors."""
    pass


class ImageDecodeError(PricolorError):
    """Input could not be turned into a non-empty pixel buffer."""
    pass


class ConfigurationError(PricolorError):
    """A numeric or enumerated option is outside its documented range."""
    pass
