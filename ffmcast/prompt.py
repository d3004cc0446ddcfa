import logging
import re
from collections.abc import Callable, Sequence
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
D = TypeVar("D")

Reader = Callable[[str], str]
Writer = Callable[[str], None]

TIMESTAMP_PATTERN = re.compile(r"^(\d+?:)?(\d?\d:)?\d?\d$")
SELECTION_PATTERN = re.compile(r"^([0-9]+|-1)$")
ANY_PATTERN = re.compile(r"^.*$")

# selecting this in a track menu falls back to the menu's default
NO_SELECTION = -1


class SelectionError(IndexError):
    pass


def validate_input(raw: str, default: str, pattern: re.Pattern[str]) -> str | None:
    """Returns the default for empty input, the input if it matches, else None."""
    value = raw.strip()

    if not value:
        return default

    if pattern.match(value):
        return value

    return None


def prompt(
    description: str,
    default: str,
    pattern: re.Pattern[str],
    read: Reader | None = None,
    write: Writer | None = None,
) -> str:
    # looked up per call so that a patched builtins.input is honored
    read = read or input
    write = write or print

    while True:
        value = validate_input(read(f"{description} [{default}]: "), default, pattern)

        if value is not None:
            return value

        logger.debug(f"rejected input for {description!r}")
        write("WARNING: Invalid input, please try again")


def select_track(candidates: Sequence[T], choice: int, default: D) -> T | D:
    if choice == NO_SELECTION:
        return default

    if choice < 0 or choice >= len(candidates):
        raise SelectionError(
            f"invalid selection ({choice}), expected -1 to {len(candidates) - 1}"
        )

    return candidates[choice]


def prompt_track_selection(
    description: str,
    candidates: Sequence[T],
    default_choice: str,
    default: D,
    read: Reader | None = None,
    write: Writer | None = None,
) -> T | D:
    """Show a numbered menu of ``candidates`` and return the chosen one.

    With no candidates there is nothing to ask and ``default`` is returned
    directly. Choices past the end of the menu are rejected and asked again.
    """
    if not candidates:
        return default

    write = write or print

    write("")
    write(description)
    write("-" * 45)
    write(f"{NO_SELECTION}: default/none")
    for i, candidate in enumerate(candidates):
        write(f" {i}: {candidate}")

    while True:
        choice = int(prompt("Selection", default_choice, SELECTION_PATTERN, read=read, write=write))

        try:
            return select_track(candidates, choice, default)
        except SelectionError as e:
            write(f"WARNING: {e}, please try again")
