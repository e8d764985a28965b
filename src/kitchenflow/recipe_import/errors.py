"""Errors raised by the recipe import pipeline."""

from .models import BatchProgress


class RecipeImportError(Exception):
    """Base class for recipe import failures."""


class InvalidSourceUrl(RecipeImportError):
    """The URL given for a web import is not usable."""


class FetchError(RecipeImportError):
    """A recipe page could not be fetched. Never retried."""

    def __init__(self, url: str, status_code: int | None = None, reason: str | None = None):
        self.url = url
        self.status_code = status_code
        self.reason = reason
        if status_code is not None:
            message = f"Failed to fetch {url}: HTTP {status_code}"
        else:
            message = f"Failed to fetch {url}: {reason or 'unreachable'}"
        super().__init__(message)


SourceUnreachable = FetchError


class MalformedContainer(RecipeImportError):
    """The uploaded archive (or its multipart envelope) cannot be opened."""


class MalformedEntry(RecipeImportError):
    """One archive entry failed to decode."""

    def __init__(self, entry_name: str, reason: str):
        self.entry_name = entry_name
        super().__init__(f"{entry_name}: {reason}")


class MalformedMetadata(RecipeImportError):
    """One structured-metadata block is not valid JSON."""


class LinkFailure(RecipeImportError):
    """Writing an ingredient-line link failed."""


class BatchItemFailure(RecipeImportError):
    """
    Creating one item of a batch failed.

    `index` is 1-based. `progress` is frozen at index - 1: earlier items
    stay persisted and later items were never attempted.
    """

    def __init__(self, index: int, progress: BatchProgress, cause: Exception):
        self.index = index
        self.progress = progress
        self.cause = cause
        super().__init__(f"Batch import failed at item {index}/{progress.total}: {cause}")
