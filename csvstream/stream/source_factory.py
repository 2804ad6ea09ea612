"""
Factory for turning caller-supplied inputs into ByteSource instances.
"""
import io
import socket
from collections.abc import Iterable
from typing import Any

from .byte_source import ByteSource, IterableSource, ReaderSource, SocketSource


def as_byte_source(obj: Any) -> ByteSource:
    """
    Wrap an input in the matching ByteSource.

    Accepts a ByteSource (returned unchanged), bytes-like data, a socket, a
    binary file-like object, or an iterable of bytes chunks.

    Raises:
        TypeError: For str, text streams and unsupported objects.
    """
    if isinstance(obj, ByteSource):
        return obj
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return ReaderSource(io.BytesIO(bytes(obj)))
    if isinstance(obj, str):
        raise TypeError("csvstream decodes bytes; encode str input or pass a binary stream")
    if isinstance(obj, socket.socket):
        return SocketSource(obj)
    if isinstance(obj, io.TextIOBase):
        raise TypeError("expected a binary stream, got a text stream; open the file in 'rb' mode")
    if hasattr(obj, "readinto") or hasattr(obj, "read"):
        return ReaderSource(obj)
    if isinstance(obj, Iterable):
        return IterableSource(obj)
    raise TypeError(f"cannot read CSV bytes from {type(obj).__name__!r}")
