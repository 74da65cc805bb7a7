class PbxError(Exception):
    pass


class ParseError(PbxError):
    """Raised when input text is not a project document."""

    def __init__(self, message: str = "not a project document", line: int = 0):
        if line:
            message = f"{message} (line {line})"
        super().__init__(message)
        self.line = line


class NotFoundError(PbxError, KeyError):
    """Raised when an identifier or path does not resolve to the expected object."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message
