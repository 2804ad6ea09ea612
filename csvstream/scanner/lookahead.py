"""
Lookahead: bytes the scanner holds back until the next byte decides their meaning.

A held closing quote may turn out to be half of a doubled quote, a held
carriage return may be half of a CRLF pair, and held leading blanks may
precede a comment marker. Once the decision is made the bytes are either
dropped or released to the caller as field content, exactly once.
"""
from typing import Optional

from .scan_codes import ScannerState


class Lookahead:
    """Held bytes plus the state that asked for them to be held."""

    def __init__(self):
        self._held = bytearray()
        self.origin: Optional[ScannerState] = None

    def hold(self, c: int, origin: ScannerState) -> None:
        """Hold one more byte on behalf of the given state."""
        self._held.append(c)
        self.origin = origin

    def release(self) -> bytes:
        """Return the held bytes as content and empty the lookahead."""
        data = bytes(self._held)
        self.clear()
        return data

    def clear(self) -> None:
        """Drop the held bytes."""
        self._held.clear()
        self.origin = None

    @property
    def pending(self) -> bytes:
        return bytes(self._held)

    def __len__(self) -> int:
        return len(self._held)

    def __bool__(self) -> bool:
        return bool(self._held)
