"""
Classification codes and states of the CSV scanner.

ScanCode is the contract between the Scanner and its caller: one code per
scanned byte, telling the caller what to do with that byte.
"""
from enum import Enum


class ScanCode(str, Enum):
    """What the caller should do with the byte just scanned."""
    CONTINUE = "continue"                # field content
    BEGIN_FIELD = "begin_field"          # first content byte of a field
    FIELD_DELIMITER = "field_delimiter"  # the current field is complete
    SKIP = "skip"                        # structural byte, not content
    END_RECORD = "end_record"            # the record is complete
    CARRIAGE_RETURN = "carriage_return"  # held until the next byte
    BARE_QUOTE = "bare_quote"            # tentative closing quote, held
    END = "end"                          # input ended with no record in progress
    ERROR = "error"                      # malformed input, see Scanner.error_kind


class ScannerState(str, Enum):
    """States of the scanner automaton."""
    BEGIN_RECORD = "begin_record"
    BEGIN_VALUE = "begin_value"
    LEADING_SPACE = "leading_space"
    IN_UNQUOTED_FIELD = "in_unquoted_field"
    IN_QUOTED_FIELD = "in_quoted_field"
    BARE_QUOTE = "bare_quote"
    CARRIAGE_RETURN = "carriage_return"
    IN_COMMENT = "in_comment"
    ERROR = "error"
