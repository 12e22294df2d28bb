"""Domain errors raised by the course file services."""


class CourseFilesError(Exception):
    """Base class for user-facing course file errors."""

    code = "error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.__doc__)


class InvalidLicense(CourseFilesError):
    """The requested license is not in the list of available licenses."""

    code = "invalid_license"

    def __init__(self, license_code: str):
        self.license_code = license_code
        super().__init__(f"Invalid license: {license_code!r}")


class TooManyFiles(CourseFilesError):
    """Too many files selected."""

    code = "too_many_files"

    def __init__(self, count: int, limit: int):
        self.count = count
        self.limit = limit
        super().__init__(f"Too many files selected ({count}, at most {limit} allowed)")


class NotYetComputed(RuntimeError):
    """The total file count is only known after a page was fetched."""


class TranslationUnavailable(RuntimeError):
    """The string lookup service cannot be used."""
