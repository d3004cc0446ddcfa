from dataclasses import dataclass


class TimestampError(ValueError):
    pass


@dataclass(frozen=True)
class Timestamp:
    """A whole number of seconds, displayed as HH:MM:SS."""

    seconds: int

    def __post_init__(self) -> None:
        if self.seconds < 0:
            raise ValueError(f"timestamp cannot be negative: {self.seconds}")

    def to_display(self) -> str:
        h = self.seconds // 3600
        m = self.seconds % 3600 // 60
        s = self.seconds % 60

        return f"{h:02d}:{m:02d}:{s:02d}"

    @classmethod
    def from_display(cls, text: str) -> "Timestamp":
        """Parse ``[[H:]M:]S``; the rightmost component is always seconds."""
        toks = text.strip().split(":")

        if len(toks) > 3:
            raise TimestampError(f"too many components in timestamp: {text!r}")

        if not all(tok.isascii() and tok.isdigit() for tok in toks):
            raise TimestampError(f"invalid timestamp: {text!r}")

        seconds = 0
        for tok, multiplier in zip(reversed(toks), (1, 60, 3600)):
            seconds += int(tok) * multiplier

        return cls(seconds)

    def __str__(self) -> str:
        return self.to_display()
