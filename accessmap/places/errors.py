from __future__ import annotations


class StoreError(Exception):
    """The remote place store could not complete a fetch, insert or increment."""


class PlaceValidationError(ValueError):
    """A submission is missing one or more required fields."""

    message = "Please fill required fields."

    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"{self.message} Missing: {', '.join(missing)}")
        self.missing = missing


class ActionFailedError(Exception):
    """A write action failed; ``message`` is shown to the user as an alert."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class RecordNotFoundError(LookupError):
    def __init__(self, record_id: str) -> None:
        super().__init__(f"No place with id {record_id!r}")
        self.record_id = record_id
