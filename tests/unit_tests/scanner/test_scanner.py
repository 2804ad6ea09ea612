# file: tests/unit_tests/scanner/test_scanner.py
import pytest

from csvstream.config.decoder_config import DecoderConfig
from csvstream.errors import ErrorKind
from csvstream.scanner.scan_codes import ScanCode, ScannerState
from csvstream.scanner.scanner import Scanner


def feed(scanner, data):
    return [scanner.step(c) for c in data]


class TestScannerBasics:
    """Codes produced for plain unquoted records."""

    def test_simple_record(self, scanner):
        codes = feed(scanner, b"a,b\n")
        assert codes == [
            ScanCode.BEGIN_FIELD,
            ScanCode.FIELD_DELIMITER,
            ScanCode.BEGIN_FIELD,
            ScanCode.END_RECORD,
        ]
        assert scanner.state == ScannerState.BEGIN_RECORD

    def test_field_content_continues(self, scanner):
        codes = feed(scanner, b"abc")
        assert codes == [ScanCode.BEGIN_FIELD, ScanCode.CONTINUE, ScanCode.CONTINUE]
        assert scanner.state == ScannerState.IN_UNQUOTED_FIELD

    def test_blank_line_is_skipped(self, scanner):
        assert scanner.step(ord("\n")) == ScanCode.SKIP
        assert scanner.state == ScannerState.BEGIN_RECORD

    def test_empty_trailing_field_ends_record(self, scanner):
        codes = feed(scanner, b"a,\n")
        assert codes[-2:] == [ScanCode.FIELD_DELIMITER, ScanCode.END_RECORD]

    def test_custom_delimiter(self):
        scanner = Scanner(delimiter=ord(";"))
        codes = feed(scanner, b"a;b,c")
        assert codes.count(ScanCode.FIELD_DELIMITER) == 1

    def test_from_config_copies_dialect(self):
        config = DecoderConfig(delimiter="\t", comment="#", trim_leading_space=True, lazy_quotes=True)
        scanner = Scanner.from_config(config)
        assert scanner.delimiter == ord("\t")
        assert scanner.comment == ord("#")
        assert scanner.trim_leading_space is True
        assert scanner.lazy_quotes is True

    def test_bytes_consumed_survives_reset(self, scanner):
        feed(scanner, b"a,b\n")
        scanner.reset()
        feed(scanner, b"c")
        assert scanner.bytes_consumed == 5


class TestScannerQuoting:
    """Quoted fields, doubled quotes and quote errors."""

    def test_quoted_field_holds_closing_quote(self, scanner):
        codes = feed(scanner, b'"x"')
        assert codes == [ScanCode.SKIP, ScanCode.CONTINUE, ScanCode.BARE_QUOTE]
        assert scanner.state == ScannerState.BARE_QUOTE
        assert scanner.lookahead.pending == b'"'

    def test_doubled_quote_is_content(self, scanner):
        feed(scanner, b'"a"')
        assert scanner.step(ord('"')) == ScanCode.CONTINUE
        assert scanner.state == ScannerState.IN_QUOTED_FIELD
        assert not scanner.lookahead
        assert scanner.released == b""

    def test_delimiter_after_closing_quote(self, scanner):
        feed(scanner, b'"a"')
        assert scanner.step(ord(",")) == ScanCode.FIELD_DELIMITER
        assert scanner.state == ScannerState.BEGIN_VALUE

    def test_delimiter_and_newline_inside_quotes_are_content(self, scanner):
        codes = feed(scanner, b'"a,\nb"')
        assert ScanCode.FIELD_DELIMITER not in codes
        assert ScanCode.END_RECORD not in codes

    def test_bare_quote_in_unquoted_field(self, scanner):
        codes = feed(scanner, b'ab"')
        assert codes[-1] == ScanCode.ERROR
        assert scanner.error_kind == ErrorKind.BARE_QUOTE_IN_UNQUOTED_FIELD
        assert scanner.error_offset == 3

    def test_extraneous_quote_in_quoted_field(self, scanner):
        codes = feed(scanner, b'"a"b')
        assert codes[-1] == ScanCode.ERROR
        assert scanner.error_kind == ErrorKind.EXTRANEOUS_QUOTE_IN_QUOTED_FIELD
        assert scanner.error_offset == 4

    def test_lazy_quotes_release_held_quote(self):
        scanner = Scanner(lazy_quotes=True)
        feed(scanner, b'"a"')
        assert scanner.step(ord("b")) == ScanCode.CONTINUE
        assert scanner.pop_released() == b'"'
        assert scanner.released == b""
        assert scanner.state == ScannerState.IN_QUOTED_FIELD

    def test_lazy_quotes_allow_bare_quote(self):
        scanner = Scanner(lazy_quotes=True)
        codes = feed(scanner, b'a"b')
        assert ScanCode.ERROR not in codes

    def test_error_state_is_absorbing(self, scanner):
        feed(scanner, b'a"')
        assert feed(scanner, b"bc\n") == [ScanCode.ERROR] * 3
        assert scanner.eof() == ScanCode.ERROR

    def test_reset_clears_error(self, scanner):
        feed(scanner, b'a"')
        scanner.reset()
        assert scanner.state == ScannerState.BEGIN_RECORD
        assert scanner.error_kind is None
        assert scanner.step(ord("a")) == ScanCode.BEGIN_FIELD


class TestScannerCarriageReturn:
    """CR handling: CRLF pairs, lone CRs and CRs in quoted fields."""

    def test_crlf_ends_record(self, scanner):
        codes = feed(scanner, b"a\r\n")
        assert codes == [ScanCode.BEGIN_FIELD, ScanCode.CARRIAGE_RETURN, ScanCode.END_RECORD]
        assert scanner.released == b""

    def test_lone_cr_is_content(self, scanner):
        feed(scanner, b"a\r")
        assert scanner.step(ord("b")) == ScanCode.CONTINUE
        assert scanner.pop_released() == b"\r"
        assert scanner.state == ScannerState.IN_UNQUOTED_FIELD

    def test_lone_cr_before_delimiter(self, scanner):
        feed(scanner, b"a\r")
        assert scanner.step(ord(",")) == ScanCode.FIELD_DELIMITER
        assert scanner.pop_released() == b"\r"

    def test_crlf_inside_quotes_is_line_feed(self, scanner):
        feed(scanner, b'"a\r')
        assert scanner.step(ord("\n")) == ScanCode.CONTINUE
        assert scanner.released == b""
        assert scanner.state == ScannerState.IN_QUOTED_FIELD

    def test_crlf_after_closing_quote(self, scanner):
        codes = feed(scanner, b'"a"\r\n')
        assert codes[-1] == ScanCode.END_RECORD

    def test_cr_after_closing_quote_is_strict_error(self, scanner):
        feed(scanner, b'"a"\r')
        assert scanner.step(ord("b")) == ScanCode.ERROR
        assert scanner.error_kind == ErrorKind.EXTRANEOUS_QUOTE_IN_QUOTED_FIELD

    def test_blank_crlf_line_is_skipped(self, scanner):
        codes = feed(scanner, b"\r\n")
        assert codes == [ScanCode.CARRIAGE_RETURN, ScanCode.SKIP]
        assert scanner.state == ScannerState.BEGIN_RECORD

    def test_trailing_cr_dropped_at_eof(self, scanner):
        feed(scanner, b"a\r")
        assert scanner.eof() == ScanCode.END_RECORD
        assert scanner.released == b""


class TestScannerCommentsAndSpace:
    """Comment lines and leading white space."""

    def test_comment_line_is_skipped(self):
        scanner = Scanner(comment=ord("#"))
        codes = feed(scanner, b"#a,\"b\n")
        assert set(codes) == {ScanCode.SKIP}
        assert scanner.state == ScannerState.BEGIN_RECORD

    def test_comment_marker_inside_field_is_content(self):
        scanner = Scanner(comment=ord("#"))
        codes = feed(scanner, b"a#")
        assert codes == [ScanCode.BEGIN_FIELD, ScanCode.CONTINUE]

    def test_comment_after_leading_blanks(self):
        scanner = Scanner(comment=ord("#"))
        assert feed(scanner, b"  ") == [ScanCode.SKIP, ScanCode.SKIP]
        assert scanner.state == ScannerState.LEADING_SPACE
        assert scanner.step(ord("#")) == ScanCode.SKIP
        assert scanner.state == ScannerState.IN_COMMENT
        assert not scanner.lookahead

    def test_leading_blanks_released_as_content(self):
        scanner = Scanner(comment=ord("#"))
        feed(scanner, b"  ")
        assert scanner.step(ord("x")) == ScanCode.CONTINUE
        assert scanner.pop_released() == b"  "

    def test_leading_blanks_released_at_eof(self):
        scanner = Scanner(comment=ord("#"))
        feed(scanner, b" ")
        assert scanner.eof() == ScanCode.END_RECORD
        assert scanner.pop_released() == b" "

    def test_trim_leading_space(self):
        scanner = Scanner(trim_leading_space=True)
        codes = feed(scanner, b" \ta, \vb")
        assert codes == [
            ScanCode.SKIP, ScanCode.SKIP, ScanCode.BEGIN_FIELD,
            ScanCode.FIELD_DELIMITER, ScanCode.SKIP, ScanCode.SKIP, ScanCode.BEGIN_FIELD,
        ]

    def test_trim_keeps_tab_delimiter(self):
        scanner = Scanner(delimiter=ord("\t"), trim_leading_space=True)
        assert scanner.step(ord("\t")) == ScanCode.FIELD_DELIMITER

    def test_trim_skips_lone_cr_before_value(self):
        scanner = Scanner(trim_leading_space=True)
        codes = feed(scanner, b"a,\rb")
        assert codes[-1] == ScanCode.BEGIN_FIELD
        assert scanner.released == b""


class TestScannerEof:
    """End-of-input classification."""

    @pytest.mark.parametrize("data", [b"", b"a\n", b"\n\n", b"a\r\n"])
    def test_clean_end(self, data):
        scanner = Scanner()
        feed(scanner, data)
        assert scanner.eof() == ScanCode.END

    def test_end_inside_comment_is_clean(self):
        scanner = Scanner(comment=ord("#"))
        feed(scanner, b"#no newline")
        assert scanner.eof() == ScanCode.END

    @pytest.mark.parametrize("data", [b"a", b"a,", b'"a"', b"a,b\r"])
    def test_record_completed_by_eof(self, data):
        scanner = Scanner()
        feed(scanner, data)
        assert scanner.eof() == ScanCode.END_RECORD
        assert scanner.state == ScannerState.BEGIN_RECORD

    def test_unterminated_quote(self):
        scanner = Scanner()
        feed(scanner, b'"abc')
        assert scanner.eof() == ScanCode.ERROR
        assert scanner.error_kind == ErrorKind.UNEXPECTED_END_OF_INPUT

    def test_unterminated_quote_lazy(self):
        scanner = Scanner(lazy_quotes=True)
        feed(scanner, b'"abc')
        assert scanner.eof() == ScanCode.END_RECORD
