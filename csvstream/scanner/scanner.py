"""
Scanner: byte-at-a-time state machine that classifies CSV input.

The scanner performs no I/O. The caller resets it, feeds it one byte at a
time through step(), and reacts to the returned ScanCode. Bytes whose
meaning depends on the byte that follows (a closing quote, a carriage
return, leading blanks before a possible comment marker) are held in a
Lookahead; when they turn out to be field content they are handed to the
caller through pop_released() before the code of the current byte is acted on.
"""
from typing import TYPE_CHECKING, Optional

from ..errors import ErrorKind
from .lookahead import Lookahead
from .scan_codes import ScanCode, ScannerState

if TYPE_CHECKING:
    from ..config.decoder_config import DecoderConfig

QUOTE = 0x22
LF = 0x0A
CR = 0x0D

# Leading whitespace removed when trim_leading_space is set, unless it is the delimiter.
TRIMMABLE = frozenset(b" \t\v\f")
# Whitespace that may precede a comment marker.
BLANKS = frozenset(b" \t")


class Scanner:
    """
    Finite-state transducer over CSV bytes.

    The machine is total: every (state, byte) pair yields a new state and a
    ScanCode. Malformed input moves it to the absorbing ERROR state, which
    keeps returning ScanCode.ERROR until reset() is called.

    bytes_consumed counts every byte passed to step() since construction and
    is not cleared by reset(), so error offsets are stream positions.
    """

    def __init__(
        self,
        delimiter: int = ord(","),
        comment: Optional[int] = None,
        trim_leading_space: bool = False,
        lazy_quotes: bool = False,
    ):
        self.delimiter = delimiter
        self.comment = comment
        self.trim_leading_space = trim_leading_space
        self.lazy_quotes = lazy_quotes

        self.state = ScannerState.BEGIN_RECORD
        self.lookahead = Lookahead()
        self.released = b""
        self.error_kind: Optional[ErrorKind] = None
        self.error_offset = 0
        self.bytes_consumed = 0

    @classmethod
    def from_config(cls, config: "DecoderConfig") -> "Scanner":
        """Create a scanner using the dialect settings of a DecoderConfig."""
        return cls(
            delimiter=config.delimiter,
            comment=config.comment,
            trim_leading_space=config.trim_leading_space,
            lazy_quotes=config.lazy_quotes,
        )

    def reset(self) -> None:
        """Return to BEGIN_RECORD and forget any error or held bytes."""
        self.state = ScannerState.BEGIN_RECORD
        self.lookahead.clear()
        self.released = b""
        self.error_kind = None

    def step(self, c: int) -> ScanCode:
        """Classify one byte and advance the machine."""
        self.bytes_consumed += 1
        return self._dispatch(self.state, c)

    def pop_released(self) -> bytes:
        """Return the bytes released as content by the last step and clear them."""
        data = self.released
        self.released = b""
        return data

    def eof(self) -> ScanCode:
        """
        Signal that the input has ended.

        Returns:
            END_RECORD if the record in progress is now complete,
            END if no record was in progress,
            ERROR if the input ended inside a quoted field and lazy quotes are off.
        """
        if self.state is ScannerState.ERROR:
            return ScanCode.ERROR

        state = self.state
        if state is ScannerState.CARRIAGE_RETURN:
            # A lone carriage return right before the end of input is dropped.
            state = self.lookahead.origin
            self.lookahead.clear()

        if state is ScannerState.BEGIN_RECORD or state is ScannerState.IN_COMMENT:
            self.state = ScannerState.BEGIN_RECORD
            return ScanCode.END
        if state is ScannerState.IN_QUOTED_FIELD and not self.lazy_quotes:
            return self._error(ErrorKind.UNEXPECTED_END_OF_INPUT)
        if state is ScannerState.LEADING_SPACE:
            self._release()
        self.lookahead.clear()
        self.state = ScannerState.BEGIN_RECORD
        return ScanCode.END_RECORD

    # --- Transitions ---

    def _dispatch(self, state: ScannerState, c: int) -> ScanCode:
        if state is ScannerState.IN_UNQUOTED_FIELD:
            return self._in_unquoted_field(c)
        if state is ScannerState.IN_QUOTED_FIELD:
            return self._in_quoted_field(c)
        if state is ScannerState.BEGIN_VALUE:
            return self._begin_value(c)
        if state is ScannerState.BEGIN_RECORD:
            return self._begin_record(c)
        if state is ScannerState.BARE_QUOTE:
            return self._bare_quote(c)
        if state is ScannerState.CARRIAGE_RETURN:
            return self._carriage_return(c)
        if state is ScannerState.LEADING_SPACE:
            return self._leading_space(c)
        if state is ScannerState.IN_COMMENT:
            return self._in_comment(c)
        return self._error_state(c)

    def _begin_record(self, c: int) -> ScanCode:
        if c == self.comment:
            self.state = ScannerState.IN_COMMENT
            return ScanCode.SKIP
        if c == LF:
            # blank line
            return ScanCode.SKIP
        if self.trim_leading_space and c in TRIMMABLE and c != self.delimiter:
            return ScanCode.SKIP
        if self.comment is not None and c in BLANKS and c != self.delimiter:
            self.lookahead.hold(c, ScannerState.LEADING_SPACE)
            self.state = ScannerState.LEADING_SPACE
            return ScanCode.SKIP
        return self._begin_value(c)

    def _begin_value(self, c: int) -> ScanCode:
        if self.trim_leading_space and c in TRIMMABLE and c != self.delimiter:
            return ScanCode.SKIP
        if c == self.delimiter:
            self.state = ScannerState.BEGIN_VALUE
            return ScanCode.FIELD_DELIMITER
        if c == QUOTE:
            self.state = ScannerState.IN_QUOTED_FIELD
            return ScanCode.SKIP
        if c == CR:
            return self._hold_carriage_return()
        if c == LF:
            return self._end_record()
        self.state = ScannerState.IN_UNQUOTED_FIELD
        return ScanCode.BEGIN_FIELD

    def _leading_space(self, c: int) -> ScanCode:
        if c in BLANKS and c != self.delimiter:
            self.lookahead.hold(c, ScannerState.LEADING_SPACE)
            return ScanCode.SKIP
        if c == self.comment:
            self.lookahead.clear()
            self.state = ScannerState.IN_COMMENT
            return ScanCode.SKIP
        self._release()
        self.state = ScannerState.IN_UNQUOTED_FIELD
        return self._in_unquoted_field(c)

    def _in_unquoted_field(self, c: int) -> ScanCode:
        if c == self.delimiter:
            self.state = ScannerState.BEGIN_VALUE
            return ScanCode.FIELD_DELIMITER
        if c == LF:
            return self._end_record()
        if c == CR:
            return self._hold_carriage_return()
        if c == QUOTE and not self.lazy_quotes:
            return self._error(ErrorKind.BARE_QUOTE_IN_UNQUOTED_FIELD)
        return ScanCode.CONTINUE

    def _in_quoted_field(self, c: int) -> ScanCode:
        if c == QUOTE:
            self.lookahead.hold(c, ScannerState.BARE_QUOTE)
            self.state = ScannerState.BARE_QUOTE
            return ScanCode.BARE_QUOTE
        if c == CR:
            return self._hold_carriage_return()
        return ScanCode.CONTINUE

    def _bare_quote(self, c: int) -> ScanCode:
        if c == QUOTE:
            # doubled quote: the held one is dropped, this one is content
            self.lookahead.clear()
            self.state = ScannerState.IN_QUOTED_FIELD
            return ScanCode.CONTINUE
        if c == self.delimiter:
            self.lookahead.clear()
            self.state = ScannerState.BEGIN_VALUE
            return ScanCode.FIELD_DELIMITER
        if c == LF:
            return self._end_record()
        if c == CR:
            return self._hold_carriage_return()
        if not self.lazy_quotes:
            return self._error(ErrorKind.EXTRANEOUS_QUOTE_IN_QUOTED_FIELD)
        self._release()
        self.state = ScannerState.IN_QUOTED_FIELD
        return self._in_quoted_field(c)

    def _carriage_return(self, c: int) -> ScanCode:
        origin = self.lookahead.origin
        if c == LF:
            self.lookahead.clear()
            if origin is ScannerState.IN_QUOTED_FIELD:
                self.state = ScannerState.IN_QUOTED_FIELD
                return ScanCode.CONTINUE
            if origin is ScannerState.BEGIN_RECORD:
                self.state = ScannerState.BEGIN_RECORD
                return ScanCode.SKIP
            return self._end_record()

        if self.trim_leading_space and (
                origin is ScannerState.BEGIN_RECORD or origin is ScannerState.BEGIN_VALUE):
            # leading whitespace of the next value
            self.lookahead.clear()
            self.state = origin
            return self._dispatch(origin, c)

        if origin is ScannerState.BARE_QUOTE:
            if not self.lazy_quotes:
                return self._error(ErrorKind.EXTRANEOUS_QUOTE_IN_QUOTED_FIELD)
            self._release()
            self.state = ScannerState.IN_QUOTED_FIELD
            return self._in_quoted_field(c)

        # The carriage return is content; redo this byte in the field state.
        self._release()
        if origin is ScannerState.IN_QUOTED_FIELD:
            self.state = ScannerState.IN_QUOTED_FIELD
            return self._in_quoted_field(c)
        self.state = ScannerState.IN_UNQUOTED_FIELD
        return self._in_unquoted_field(c)

    def _in_comment(self, c: int) -> ScanCode:
        if c == LF:
            self.state = ScannerState.BEGIN_RECORD
        return ScanCode.SKIP

    def _error_state(self, c: int) -> ScanCode:
        return ScanCode.ERROR

    # --- Helpers ---

    def _hold_carriage_return(self) -> ScanCode:
        self.lookahead.hold(CR, self.state)
        self.state = ScannerState.CARRIAGE_RETURN
        return ScanCode.CARRIAGE_RETURN

    def _end_record(self) -> ScanCode:
        self.lookahead.clear()
        self.state = ScannerState.BEGIN_RECORD
        return ScanCode.END_RECORD

    def _release(self) -> None:
        self.released += self.lookahead.release()

    def _error(self, kind: ErrorKind) -> ScanCode:
        self.lookahead.clear()
        self.state = ScannerState.ERROR
        self.error_kind = kind
        self.error_offset = self.bytes_consumed
        return ScanCode.ERROR
