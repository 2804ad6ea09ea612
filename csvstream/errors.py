"""
Error types raised by the streaming CSV decoder.

Every failure carries an ErrorKind so callers can branch on the category
without matching on exception classes or message text.
"""
from enum import Enum
from typing import List, Optional, Union


class ErrorKind(str, Enum):
    """Categories of decoder failures."""
    BARE_QUOTE_IN_UNQUOTED_FIELD = "bare_quote_in_unquoted_field"
    EXTRANEOUS_QUOTE_IN_QUOTED_FIELD = "extraneous_quote_in_quoted_field"
    WRONG_FIELD_COUNT = "wrong_field_count"
    UNEXPECTED_END_OF_INPUT = "unexpected_end_of_input"
    SOURCE_IO_ERROR = "source_io_error"


_REASONS = {
    ErrorKind.BARE_QUOTE_IN_UNQUOTED_FIELD: 'bare " in non-quoted-field',
    ErrorKind.EXTRANEOUS_QUOTE_IN_QUOTED_FIELD: 'extraneous or missing " in quoted-field',
    ErrorKind.WRONG_FIELD_COUNT: "wrong number of fields",
    ErrorKind.UNEXPECTED_END_OF_INPUT: "unexpected end of CSV input",
}


class CsvStreamError(Exception):
    """Base class for every error raised by csvstream."""

    kind: ErrorKind


class ParseError(CsvStreamError, ValueError):
    """
    Raised when the input is not valid CSV.

    Attributes:
        kind: The error category.
        offset: Number of bytes consumed from the stream when the error occurred.
        line: 1-based line number of the offending byte (0 if unknown).
        column: 1-based byte column of the offending byte (0 if unknown).
    """

    def __init__(self, kind: ErrorKind, offset: int = 0, line: int = 0, column: int = 0):
        self.kind = kind
        self.offset = offset
        self.line = line
        self.column = column
        super().__init__(self._format())

    @property
    def reason(self) -> str:
        return _REASONS[self.kind]

    def _format(self) -> str:
        if self.line:
            return f"line {self.line}, column {self.column}: {self.reason}"
        return f"offset {self.offset}: {self.reason}"

    @classmethod
    def for_kind(cls, kind: ErrorKind, offset: int = 0, line: int = 0, column: int = 0) -> "ParseError":
        """Build the ParseError subclass that matches a scanner error kind."""
        error_class = _PARSE_ERROR_CLASSES.get(kind)
        if error_class is None:
            return cls(kind, offset, line, column)
        return error_class(offset=offset, line=line, column=column)


class BareQuoteError(ParseError):
    """A quote appeared inside an unquoted field while lazy quotes are disabled."""

    def __init__(self, offset: int = 0, line: int = 0, column: int = 0):
        super().__init__(ErrorKind.BARE_QUOTE_IN_UNQUOTED_FIELD, offset, line, column)


class ExtraneousQuoteError(ParseError):
    """A closing quote was followed by something other than a delimiter or line end."""

    def __init__(self, offset: int = 0, line: int = 0, column: int = 0):
        super().__init__(ErrorKind.EXTRANEOUS_QUOTE_IN_QUOTED_FIELD, offset, line, column)


class UnexpectedEndOfInputError(ParseError):
    """The input ended inside a quoted field."""

    def __init__(self, offset: int = 0, line: int = 0, column: int = 0):
        super().__init__(ErrorKind.UNEXPECTED_END_OF_INPUT, offset, line, column)


class FieldCountError(ParseError):
    """
    A record does not have the expected number of fields.

    The decoded record is kept on the error so callers can still inspect
    what was observed.
    """

    def __init__(
        self,
        record: List[Union[str, bytes]],
        expected: int,
        offset: int = 0,
        line: int = 0,
    ):
        self.record = record
        self.expected = expected
        self.actual = len(record)
        super().__init__(ErrorKind.WRONG_FIELD_COUNT, offset, line, 0)

    def _format(self) -> str:
        return (f"record on line {self.line}: {self.reason} "
                f"(expected {self.expected}, got {self.actual})")


class SourceIOError(CsvStreamError, IOError):
    """The byte source failed; the original exception is kept as ``cause``."""

    kind = ErrorKind.SOURCE_IO_ERROR

    def __init__(self, cause: BaseException, offset: int = 0):
        self.cause: Optional[BaseException] = cause
        self.offset = offset
        super().__init__(f"byte source failed after {offset} bytes: {cause!r}")


_PARSE_ERROR_CLASSES = {
    ErrorKind.BARE_QUOTE_IN_UNQUOTED_FIELD: BareQuoteError,
    ErrorKind.EXTRANEOUS_QUOTE_IN_QUOTED_FIELD: ExtraneousQuoteError,
    ErrorKind.UNEXPECTED_END_OF_INPUT: UnexpectedEndOfInputError,
}
