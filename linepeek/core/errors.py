class LinepeekError(Exception):
    """Base error for linepeek."""


class UnreadableInputError(LinepeekError):
    pass


class UnsupportedFileError(LinepeekError):
    pass


class NotTextError(LinepeekError):
    """The sample was classified as binary."""


class RichTextExportError(LinepeekError):
    pass


class ConfigError(LinepeekError):
    pass
