"""Error types shared by the stores and the backup codec."""


class JournalError(Exception):
    """Base class for journal errors."""


# ---------- Store layer (absorbed by the stores, never raised to callers) ----------
class StoreUnavailable(JournalError):
    pass


class MalformedStoredData(JournalError):
    pass


# ---------- Backup import (user-facing, recoverable) ----------
class BackupImportError(JournalError):
    message = "The backup could not be imported."

    def __init__(self, message=None):
        super().__init__(message or self.message)


class InvalidDocument(BackupImportError):
    message = "The file is not valid JSON. Please choose a habits-backup.json file."


class UnrecognizedFormat(BackupImportError):
    message = "Unrecognised file format. Only files exported from Clarity are supported."


class NoValidEntries(BackupImportError):
    message = "No valid entries found in the file."


class ReadFailure(BackupImportError):
    message = "Failed to read the file."
