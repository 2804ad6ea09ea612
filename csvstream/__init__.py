"""
csvstream: incremental, streaming CSV decoding.

Reads records one at a time from files, sockets, pipes or chunk iterables
while holding only a bounded read-ahead window in memory.
"""
from .config.decoder_config import DecoderConfig
from .errors import (
    ErrorKind,
    CsvStreamError,
    ParseError,
    BareQuoteError,
    ExtraneousQuoteError,
    UnexpectedEndOfInputError,
    FieldCountError,
    SourceIOError,
)
from .scanner import Scanner, ScanCode, ScannerState, valid, check_valid
from .stream import (
    Decoder,
    Record,
    ByteSource,
    ReadResult,
    ReaderSource,
    SocketSource,
    IterableSource,
    as_byte_source,
    iter_records,
    decode_all,
)

__version__ = "0.1.0"

__all__ = [
    "Decoder",
    "DecoderConfig",
    "Record",
    "iter_records",
    "decode_all",
    "valid",
    "check_valid",

    "Scanner",
    "ScanCode",
    "ScannerState",

    "ByteSource",
    "ReadResult",
    "ReaderSource",
    "SocketSource",
    "IterableSource",
    "as_byte_source",

    "ErrorKind",
    "CsvStreamError",
    "ParseError",
    "BareQuoteError",
    "ExtraneousQuoteError",
    "UnexpectedEndOfInputError",
    "FieldCountError",
    "SourceIOError",
]
