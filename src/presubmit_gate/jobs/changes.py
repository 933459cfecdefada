"""Changed-file providers for change-based run conditions.

A presubmit that declares `run_if_changed` or `skip_if_only_changed` needs
the list of files touched by the change under test. Fetching that list is
usually an API call, so providers are only consulted when a presubmit
actually needs them:
- StaticChangedFilesProvider: a fixed list (CLI, tests)
- DeferredChangedFilesProvider: wraps a fetch callable, caches on success
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)


class ChangedFilesError(Exception):
    """Raised when the list of changed files cannot be determined."""


class ChangedFilesProvider(Protocol):
    """Protocol for providing the files changed by a pull request."""

    def changed_files(self) -> list[str]:
        """Get the changed file paths.

        Returns:
            Paths relative to the repository root.

        Raises:
            ChangedFilesError: If the files cannot be determined.
        """
        ...


class StaticChangedFilesProvider:
    """Provider backed by a fixed list of paths."""

    def __init__(self, files: Iterable[str] = ()) -> None:
        self._files = list(files)

    def changed_files(self) -> list[str]:
        """Return a copy of the configured paths."""
        return list(self._files)


class DeferredChangedFilesProvider:
    """Provider that fetches lazily and remembers the answer.

    The fetch callable runs at most once per successful fetch. A failed
    fetch is not cached, so a later caller may try again.

    Example:
        >>> provider = DeferredChangedFilesProvider(lambda: ["README.md"])
        >>> provider.changed_files()
        ['README.md']
    """

    def __init__(self, fetch: Callable[[], Iterable[str]]) -> None:
        """Initialize with a fetch callable.

        Args:
            fetch: Zero-argument callable returning changed paths.
        """
        self._fetch = fetch
        self._files: list[str] | None = None

    @property
    def fetched(self) -> bool:
        """Whether the changed files have been fetched already."""
        return self._files is not None

    def changed_files(self) -> list[str]:
        """Fetch (once) and return the changed paths.

        Raises:
            ChangedFilesError: If the fetch callable fails.
        """
        if self._files is None:
            try:
                files = list(self._fetch())
            except ChangedFilesError:
                raise
            except Exception as e:
                msg = f"Failed to fetch changed files: {e}"
                raise ChangedFilesError(msg) from e
            logger.debug("Fetched %d changed files", len(files))
            self._files = files
        return list(self._files)
