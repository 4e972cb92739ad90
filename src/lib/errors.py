"""
Exception hierarchy for tex2lia
"""


class Tex2LiaError(Exception):
    """Base class of all tex2lia errors"""
    pass


class ExtractionError(Tex2LiaError):
    """Raised when a macro argument cannot be extracted"""

    def __init__(self, message: str, position: int) -> None:
        super().__init__(message)
        self.position = position


class UnbalancedBraceError(ExtractionError):
    """Raised when end of text is reached before the matching closing brace"""
    pass


class MissingParameterError(ExtractionError):
    """Raised when fewer {...} groups follow a macro than it requires"""

    def __init__(self, message: str, position: int, found: int, expected: int) -> None:
        super().__init__(message, position)
        self.found = found
        self.expected = expected


class PandocError(Tex2LiaError):
    """Raised when the external pandoc conversion fails"""
    pass


class ExportError(Tex2LiaError):
    """Raised when an export target cannot be produced"""
    pass


class MetadataError(Tex2LiaError):
    """Raised when export metadata loading or validation fails"""
    pass
