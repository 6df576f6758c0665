"""Error taxonomy shared by repositories and workflows.

Expected failures travel inside ``Err`` results rather than being raised; the
classes still derive from ``RuntimeError`` so an adapter can raise them at its
own boundary and a caller can re-raise a result's error when it wants to.
"""

from __future__ import annotations


class MasterDataError(RuntimeError):
    """Base class for every failure a workflow can report."""

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code

    @property
    def message(self) -> str:
        return str(self)


class ValidationConflict(MasterDataError):
    """A uniqueness key is already taken by another record."""

    def __init__(self, entity: str, field: str, value: str) -> None:
        super().__init__(f"{entity} {field} already exists", code="conflict")
        self.entity = entity
        self.field = field
        self.value = value


class RepositoryFailure(MasterDataError):
    """Transport or storage failure; the message is shown to the user verbatim."""


class NetworkFailure(RepositoryFailure):
    """The remote API could not be reached."""


class ServerFailure(RepositoryFailure):
    """The remote API answered but rejected or mangled the request."""


class CacheFailure(RepositoryFailure):
    """The local cache could not be read or written."""


class NotFound(MasterDataError):
    """A lookup by identifier returned nothing."""

    def __init__(self, entity: str, identifier: object) -> None:
        super().__init__(f"{entity} {identifier} not found", code="not_found")
        self.entity = entity
        self.identifier = identifier


class UnsyncedRecordError(MasterDataError):
    """A record without a server identifier was used where one is required."""


class BackgroundTaskFailure(MasterDataError):
    """A detached post-mutation task failed. Logged, never returned."""
