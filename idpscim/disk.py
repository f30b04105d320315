"""State repository backed by a readable and writable stream, such as an open file."""

from __future__ import annotations

import json
from typing import IO, Any

from idpscim.models import State


class RepositoryError(Exception):
    """Raised when the disk repository cannot read or write the state."""

    code = "ErrRepository"


class StateFileNilError(RepositoryError):
    """Raised when no state stream is given."""

    code = "ErrStateFileNil"


class ReadingStateFileError(RepositoryError):
    """Raised when the state stream cannot be read."""

    code = "ErrReadingStateFile"


class StateFileEmptyError(RepositoryError):
    """Raised when the state stream holds no data."""

    code = "ErrStateFileEmpty"


class DiskRepository:
    """Loads and stores the synchronization state as JSON in a text or binary stream."""

    def __init__(self, state_file: IO[Any] | None) -> None:
        if state_file is None:
            raise StateFileNilError("state file cannot be nil")
        self._state_file = state_file

    def get_state(self) -> State:
        """Read the rest of the stream and decode it as a state."""
        try:
            data = self._state_file.read()
            if isinstance(data, (bytes, bytearray)):
                data = bytes(data).decode("utf-8")
        except (OSError, ValueError) as exc:
            raise ReadingStateFileError(f"error reading state file: {exc}") from exc

        if not data:
            raise StateFileEmptyError("state file is empty")

        try:
            return State.from_dict(json.loads(data))
        except (ValueError, TypeError) as exc:
            raise RepositoryError(f"disk: error unmarshalling state: {exc}") from exc

    def set_state(self, state: State | None) -> None:
        """Write the state as indented JSON followed by a newline."""
        try:
            payload = json.dumps(
                None if state is None else state.to_dict(), indent=2, ensure_ascii=False
            ) + "\n"
            try:
                self._state_file.write(payload)
            except TypeError:
                self._state_file.write(payload.encode("utf-8"))
            flush = getattr(self._state_file, "flush", None)
            if callable(flush):
                flush()
        except (OSError, TypeError, ValueError) as exc:
            raise RepositoryError(f"disk: error encoding state: {exc}") from exc