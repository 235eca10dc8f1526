class TransEditorError(Exception):
    """Base class for all errors raised by the translation editor."""


class ConfigurationError(TransEditorError):
    pass


class InvalidGroupError(TransEditorError):
    """The requested translation group has no file in the fallback locale directory."""

    def __init__(self, group, message=None):
        self.group = group
        super().__init__(message or f"Translation group {group!r} does not exist")


class LocaleDirectoryMissingError(TransEditorError):
    def __init__(self, path, message=None):
        self.path = path
        super().__init__(message or f"Locale directory not found: {path}")


class MalformedTranslationFileError(TransEditorError):
    """A locale file exists but is not a flat mapping of string keys to string values."""

    def __init__(self, locale, group, path, reason):
        self.locale = locale
        self.group = group
        self.path = path
        self.reason = reason
        super().__init__(f"Malformed translation file for group {group!r} in locale {locale!r} ({path}): {reason}")


class TranslationFormatError(TransEditorError):
    """Raised by a file format when content cannot be parsed or entries cannot be serialized."""


class TranslationIOError(TransEditorError):
    """Wraps an OSError raised by the file system, keeping the offending path."""

    def __init__(self, path, error: OSError):
        self.path = path
        self.error = error
        super().__init__(f"I/O failure on {path}: {error.strerror or error}")


class TranslationWriteError(TransEditorError):
    """At least one locale file of a group failed to write.

    ``results`` holds the outcome for every locale that was attempted.
    """

    def __init__(self, results):
        self.results = results
        super().__init__(
            f"Failed to write translation group {results.group!r} for locales: {', '.join(results.failed_locales)}")
