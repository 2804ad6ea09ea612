"""
Syntax validation of in-memory CSV payloads.

Runs the Scanner over a complete payload without building any records,
which is cheaper than decoding when only well-formedness matters.
"""
from typing import Optional, Union

from ..config.decoder_config import DecoderConfig
from ..errors import ParseError
from .scan_codes import ScanCode
from .scanner import LF, Scanner


def check_valid(data: Union[bytes, str], config: Optional[DecoderConfig] = None) -> Optional[ParseError]:
    """
    Scan a complete CSV payload and return the first syntax error, if any.

    Field counts are not checked; only quoting and end-of-input rules are.

    Args:
        data: The payload. A str is encoded with the config's encoding.
        config: Dialect settings. Uses defaults if not provided.

    Returns:
        The ParseError describing the first problem, or None if the payload is valid.
    """
    config = config or DecoderConfig()
    if isinstance(data, str):
        data = data.encode(config.encoding or "utf-8")

    scanner = Scanner.from_config(config)
    scanner.reset()
    line, column = 1, 0
    for c in data:
        column += 1
        if scanner.step(c) is ScanCode.ERROR:
            return ParseError.for_kind(scanner.error_kind, scanner.error_offset, line, column)
        if c == LF:
            line += 1
            column = 0

    if scanner.eof() is ScanCode.ERROR:
        return ParseError.for_kind(scanner.error_kind, scanner.error_offset, line, column)
    return None


def valid(data: Union[bytes, str], config: Optional[DecoderConfig] = None) -> bool:
    """Report whether a complete payload is syntactically valid CSV."""
    return check_valid(data, config) is None
