"""Fatal pipeline failures.

Each error carries a default, user-facing message telling the uploader what
to do next; callers can show ``str(exc)`` as-is.
"""

from typing import ClassVar


class ProcessorError(Exception):
    """Base exception for all processor-related errors."""

    default_message: ClassVar[str] = "Processing the export failed."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class NotAZipLikeFileError(ProcessorError):
    """Raised when the upload does not carry the expected archive extension."""

    default_message = "Please upload a ZIP file exported from Google Takeout."


class ArchiveCorruptError(ProcessorError):
    """Raised when the container cannot be opened."""

    default_message = (
        "Failed to read the ZIP file. Please ensure the file is not corrupted "
        "and that the download from Google finished completely."
    )


class MissingExpectedDirectoryError(ProcessorError):
    """Raised when the archive has no Takeout/Fit/ directory."""

    default_message = (
        'Invalid Google Takeout structure. Missing "Fit" directory.\n'
        "Please ensure you:\n"
        '1. Selected ONLY "Fit" data in Google Takeout\n'
        "2. Downloaded the complete export from Google"
    )


class NoEligibleFilesError(ProcessorError):
    """Raised when no entry survives the path filter."""

    default_message = (
        "No valid Google Fit data found!\n"
        "Please ensure:\n"
        '1. You selected "Fit" data in Google Takeout\n'
        "2. The export contains activity data\n"
        "3. You waited for Google to prepare the export (may take hours)\n"
        "4. You downloaded the COMPLETE export from Google"
    )


class NoRecognizedSignalDataError(ProcessorError):
    """Raised when the accepted entries yield no heart rate, steps, distance or sleep data."""

    default_message = (
        "No fitness data found!\n"
        "Found files but no valid heart rate, steps, distance or sleep data.\n"
        "Ensure the smartwatch was properly synced with Google Fit."
    )
