# Stream package
"""
Streaming CSV decoding.

Main components:
- Decoder: has_more() / decode() record decoder over a byte source
- ReadBuffer: growable read-ahead buffer with a consumption cursor
- ByteSource and its adapters: the input side of the decoder
"""
from .byte_source import ByteSource, ReadResult, ReaderSource, SocketSource, IterableSource
from .source_factory import as_byte_source
from .read_buffer import ReadBuffer
from .decoder import Decoder, Record, iter_records, decode_all

__all__ = [
    # Main classes
    "Decoder",
    "ReadBuffer",
    "Record",

    # Sources
    "ByteSource",
    "ReadResult",
    "ReaderSource",
    "SocketSource",
    "IterableSource",
    "as_byte_source",

    # Convenience functions
    "iter_records",
    "decode_all",
]
