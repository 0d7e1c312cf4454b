"""Result type for explicit error handling.

Every step of the maintenance workflow that can fail returns a Result
instead of raising. Callers match on it:

    match parse_release_version("2.3.5"):
        case Ok(release):
            print(release.incremental)
        case Err(error):
            print(f"invalid version: {error.text}")
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Successful result carrying a value."""

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Failed result carrying an error value."""

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]
