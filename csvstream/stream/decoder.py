"""
Decoder: the streaming CSV record decoder.

This is the primary entry point of csvstream. It pulls bytes from a byte
source into a ReadBuffer, drives the Scanner over them one byte at a time,
and assembles one record per decode() call. Only the unconsumed read-ahead
and the record in progress are held in memory.
"""
import logging
from typing import Any, Iterator, List, Optional, Union

from ..config.decoder_config import DecoderConfig
from ..errors import CsvStreamError, FieldCountError, ParseError, SourceIOError
from ..scanner.scan_codes import ScanCode
from ..scanner.scanner import BLANKS, CR, LF, TRIMMABLE, Scanner
from .read_buffer import ReadBuffer
from .source_factory import as_byte_source

logger = logging.getLogger(__name__)

Record = List[Union[str, bytes]]


class Decoder:
    """
    Reads CSV records from a byte source, one record per decode() call.

    Typical use::

        decoder = Decoder(open("data.csv", "rb"))
        while decoder.has_more():
            record = decoder.decode()

    A decoder is not thread-safe; use one instance per stream. Any error is
    sticky: once decode() has raised, every later call raises the same error
    and has_more() reports False.
    """

    def __init__(self, source: Any, config: Optional[DecoderConfig] = None, **options: Any):
        """
        Initialize the decoder.

        Args:
            source: A ByteSource, bytes, a binary stream, a socket or an iterable of bytes chunks.
            config: Decoder configuration. Uses defaults if not provided.
            **options: DecoderConfig options overriding those of config.
        """
        if config is None:
            config = DecoderConfig(**options)
        elif options:
            config = config.replace(**options)
        self._config = config
        self._source = as_byte_source(source)
        self._buffer = ReadBuffer(config.buffer_size)
        self._scanner = Scanner.from_config(config)

        # Unescaped bytes of the record in progress and the start offset of each field.
        self._line_buffer = bytearray()
        self._field_offsets: List[int] = [0]
        self._fields_per_record = config.fields_per_record

        self._error: Optional[Exception] = None
        self._read_error: Optional[Exception] = None
        self._source_exhausted = False

        # has_more() progress past the cursor that is not committed yet.
        self._peek_offset = 0
        self._peek_in_comment = False

        self._line = 1
        self._column = 0
        self._record_line = 0
        self._records_decoded = 0
        logger.debug("Decoder initialized with %r", config)

    # --- Properties ---

    @property
    def config(self) -> DecoderConfig:
        return self._config

    @property
    def error(self) -> Optional[Exception]:
        """The sticky error, if decoding has failed."""
        return self._error

    @property
    def fields_per_record(self) -> int:
        """The enforced field count (0 until the first record when inferring, negative if disabled)."""
        return self._fields_per_record

    @property
    def bytes_consumed(self) -> int:
        return self._scanner.bytes_consumed

    @property
    def line(self) -> int:
        """1-based line number of the next unconsumed byte."""
        return self._line

    @property
    def records_decoded(self) -> int:
        return self._records_decoded

    # --- Public API ---

    def has_more(self) -> bool:
        """
        Report whether another record may be decoded.

        Skips blank lines, comment lines and (when trimming) leading white
        space, refilling from the source as needed, but never consumes bytes
        that belong to a record. Returns True when a source error is pending
        so that the next decode() reports it.
        """
        if self._error is not None:
            return False
        while True:
            found = self._skip_insignificant(at_end=self._source_exhausted)
            if found is not None:
                return found
            if self._read_error is not None:
                return True
            self._refill()

    def decode(self) -> Optional[Record]:
        """
        Decode the next record.

        Returns:
            The record's fields (str, or bytes when the config's encoding is None),
            or None if the stream ended cleanly before another record started.

        Raises:
            ParseError: On malformed input or a field count mismatch.
            SourceIOError: If the byte source failed.
        """
        if self._error is not None:
            raise self._error

        self._line_buffer.clear()
        del self._field_offsets[1:]
        self._scanner.reset()
        self._peek_offset = 0
        self._peek_in_comment = False

        try:
            if not self._read_record():
                return None
            record = self._build_record()
        except (CsvStreamError, UnicodeDecodeError) as err:
            self._fail(err)
            raise

        self._records_decoded += 1
        return record

    def __iter__(self) -> Iterator[Record]:
        while self.has_more():
            record = self.decode()
            if record is None:
                return
            yield record

    # --- Record assembly ---

    def _read_record(self) -> bool:
        """Scan until a record is complete; return False at a clean end of stream."""
        while True:
            if self._scan_buffered():
                return True

            # Read outcomes are only acted on once the bytes read with them are scanned.
            if self._read_error is not None:
                cause = self._read_error
                raise SourceIOError(cause, self._scanner.bytes_consumed) from cause
            if self._source_exhausted:
                return self._finish_at_end()
            self._refill()

    def _scan_buffered(self) -> bool:
        """Feed buffered bytes to the scanner; return True once a record ends."""
        buf = self._buffer
        data = buf.data
        end = buf.end
        i = buf.cursor
        scanner = self._scanner
        step = scanner.step
        line_buffer = self._line_buffer
        offsets = self._field_offsets
        line = self._line
        column = self._column

        try:
            while i < end:
                c = data[i]
                i += 1
                column += 1
                code = step(c)
                if scanner.released:
                    line_buffer += scanner.pop_released()

                if code is ScanCode.CONTINUE or code is ScanCode.BEGIN_FIELD:
                    line_buffer.append(c)
                elif code is ScanCode.FIELD_DELIMITER:
                    offsets.append(len(line_buffer))
                elif code is ScanCode.END_RECORD:
                    self._record_line = line
                    line += 1
                    column = 0
                    return True
                elif code is ScanCode.ERROR:
                    raise ParseError.for_kind(scanner.error_kind, scanner.error_offset, line, column)

                if c == LF:
                    line += 1
                    column = 0
            return False
        finally:
            buf.cursor = i
            self._line = line
            self._column = column

    def _finish_at_end(self) -> bool:
        scanner = self._scanner
        code = scanner.eof()
        if scanner.released:
            self._line_buffer += scanner.pop_released()
        if code is ScanCode.ERROR:
            raise ParseError.for_kind(scanner.error_kind, scanner.error_offset, self._line, self._column)
        if code is ScanCode.END:
            logger.debug("End of CSV stream after %d records.", self._records_decoded)
            return False
        self._record_line = self._line
        return True

    def _build_record(self) -> Record:
        raw = bytes(self._line_buffer)
        starts = self._field_offsets
        stops = starts[1:] + [len(raw)]
        fields: Record = [raw[start:stop] for start, stop in zip(starts, stops)]

        encoding = self._config.encoding
        if encoding is not None:
            errors = self._config.errors
            fields = [field.decode(encoding, errors) for field in fields]

        expected = self._fields_per_record
        if expected == 0:
            self._fields_per_record = len(fields)
        elif expected > 0 and len(fields) != expected:
            raise FieldCountError(fields, expected, self._scanner.bytes_consumed, self._record_line)
        return fields

    def _fail(self, err: Exception) -> None:
        self._error = err
        logger.warning("CSV decoding failed after %d records: %s", self._records_decoded, err)

    # --- Buffering ---

    def _refill(self) -> None:
        """Read once from the source, deferring end of input and errors to the caller's loop."""
        try:
            result = self._buffer.fill_from(self._source)
        except Exception as exc:
            logger.debug("Byte source raised %r; reporting it after buffered data is scanned.", exc)
            self._read_error = exc
            return
        if result.at_end:
            self._source_exhausted = True
            logger.debug("Byte source exhausted after %d bytes.", self._scanner.bytes_consumed + self._buffer.unread)

    def _skip_insignificant(self, at_end: bool) -> Optional[bool]:
        """
        Advance the cursor past bytes that can never be record content.

        Returns:
            True if record content starts at the cursor, False if nothing but
            insignificant bytes remain and the input has ended, None if more
            data is needed to decide.
        """
        buf = self._buffer
        data = buf.data
        end = buf.end
        config = self._config
        comment = config.comment
        delimiter = config.delimiter
        trim = config.trim_leading_space
        i = buf.cursor + self._peek_offset

        while i < end:
            c = data[i]
            if self._peek_in_comment:
                i += 1
                if c == LF:
                    self._peek_in_comment = False
                    self._commit(i)
                continue
            if c == comment:
                # Committed only once the whole line is seen.
                self._peek_in_comment = True
                i += 1
                continue
            if c == LF or (trim and c in TRIMMABLE and c != delimiter):
                i += 1
                self._commit(i)
                continue
            if c == CR:
                if i + 1 == end and not at_end:
                    break
                if i + 1 == end or data[i + 1] == LF:
                    i = min(i + 2, end)
                    self._commit(i)
                    continue
                if trim:
                    i += 1
                    self._commit(i)
                    continue
                return self._found_content()
            if comment is not None and c in BLANKS and c != delimiter:
                j = i
                while j < end and data[j] in BLANKS and data[j] != delimiter:
                    j += 1
                if j == end:
                    if at_end:
                        return self._found_content()
                    break
                if data[j] == comment:
                    self._peek_in_comment = True
                    i = j + 1
                    continue
            return self._found_content()

        if at_end:
            self._peek_in_comment = False
            self._commit(end)
            return False
        self._peek_offset = i - buf.cursor
        return None

    def _found_content(self) -> bool:
        self._peek_offset = 0
        return True

    def _commit(self, position: int) -> None:
        """Move the cursor to position, accounting for the skipped bytes."""
        buf = self._buffer
        start = buf.cursor
        if position <= start:
            return
        newlines = buf.data.count(b"\n", start, position)
        if newlines:
            self._line += newlines
            self._column = position - buf.data.rfind(b"\n", start, position) - 1
        else:
            self._column += position - start
        self._scanner.bytes_consumed += position - start
        buf.cursor = position
        self._peek_offset = 0


def iter_records(source: Any, config: Optional[DecoderConfig] = None, **options: Any) -> Iterator[Record]:
    """
    Iterate over the records of a CSV byte source.

    Args:
        source: Anything accepted by Decoder.
        config: Optional decoder configuration.
        **options: DecoderConfig options overriding those of config.
    """
    return iter(Decoder(source, config, **options))


def decode_all(source: Any, config: Optional[DecoderConfig] = None, **options: Any) -> List[Record]:
    """Decode every record of a CSV byte source into a list."""
    return list(iter_records(source, config, **options))
