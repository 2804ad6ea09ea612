# Scanner package
"""
Byte-level CSV scanning.

Main components:
- Scanner: the byte-at-a-time classifying state machine
- ScanCode / ScannerState: its output codes and states
- Lookahead: bytes held until the next byte decides their meaning
- valid / check_valid: syntax validation of in-memory payloads
"""
from .scan_codes import ScanCode, ScannerState
from .lookahead import Lookahead
from .scanner import Scanner
from .validation import valid, check_valid

__all__ = [
    "Scanner",
    "ScanCode",
    "ScannerState",
    "Lookahead",
    "valid",
    "check_valid",
]
