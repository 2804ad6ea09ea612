"""
DecoderConfig: dialect and buffering options of the streaming decoder.
"""
from typing import Any, Dict, Optional, Union

from .config import Config

ByteLike = Union[str, bytes, int]

_FORBIDDEN = {ord('"'): "a quote", ord("\r"): "a carriage return", ord("\n"): "a line feed", 0: "NUL"}


def _to_byte(name: str, value: ByteLike) -> int:
    """Convert a one-character str, one-byte bytes or int into a byte value."""
    if isinstance(value, int) and not isinstance(value, bool):
        c = value
    elif isinstance(value, (bytes, bytearray)) and len(value) == 1:
        c = value[0]
    elif isinstance(value, str) and len(value) == 1:
        c = ord(value)
        if c > 0x7F:
            raise ValueError(f"{name} must be a single-byte character, got {value!r}")
    else:
        raise ValueError(f"{name} must be a single character, got {value!r}")

    if not 0 <= c <= 0xFF:
        raise ValueError(f"{name} must be a byte value, got {c}")
    if c in _FORBIDDEN:
        raise ValueError(f"{name} cannot be {_FORBIDDEN[c]}")
    return c


class DecoderConfig:
    """
    Configuration for the streaming decoder.

    Attributes:
        delimiter: Field delimiter byte (default ',').
        comment: Comment marker byte, or None to disable comment lines.
        trim_leading_space: Drop leading white space of every field.
        lazy_quotes: Accept quotes in unquoted fields and non-doubled quotes in quoted fields.
        fields_per_record: 0 infers the count from the first record and enforces it,
            a positive value enforces that exact count, a negative value disables the check.
        encoding: Codec used to turn field bytes into str; None yields bytes fields.
        errors: Codec error handler passed to bytes.decode().
        buffer_size: Initial capacity of the read buffer.
    """

    DEFAULT_BUFFER_SIZE = 4096

    def __init__(
        self,
        delimiter: ByteLike = ",",
        comment: Optional[ByteLike] = None,
        trim_leading_space: bool = False,
        lazy_quotes: bool = False,
        fields_per_record: int = 0,
        encoding: Optional[str] = "utf-8",
        errors: str = "strict",
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ):
        self.delimiter = _to_byte("delimiter", delimiter)
        self.comment = None if comment is None else _to_byte("comment", comment)
        if self.comment == self.delimiter:
            raise ValueError("comment and delimiter must differ")
        if buffer_size <= 0:
            raise ValueError(f"buffer_size must be positive, got {buffer_size}")

        self.trim_leading_space = bool(trim_leading_space)
        self.lazy_quotes = bool(lazy_quotes)
        self.fields_per_record = int(fields_per_record)
        self.encoding = encoding
        self.errors = errors
        self.buffer_size = buffer_size

    @classmethod
    def from_env(cls, env_config: Optional[Config] = None, **overrides: Any) -> "DecoderConfig":
        """
        Build a config from the CSVSTREAM_* environment variables.

        Args:
            env_config: Pre-loaded environment settings. Read fresh if not provided.
            **overrides: Options that take precedence over the environment.
        """
        env = env_config or Config()
        options: Dict[str, Any] = {
            "delimiter": env.CSVSTREAM_DELIMITER,
            "comment": env.CSVSTREAM_COMMENT,
            "trim_leading_space": env.CSVSTREAM_TRIM_LEADING_SPACE,
            "lazy_quotes": env.CSVSTREAM_LAZY_QUOTES,
            "fields_per_record": env.CSVSTREAM_FIELDS_PER_RECORD,
            "encoding": env.CSVSTREAM_ENCODING,
            "buffer_size": env.CSVSTREAM_BUFFER_SIZE,
        }
        options.update(overrides)
        return cls(**options)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "delimiter": self.delimiter,
            "comment": self.comment,
            "trim_leading_space": self.trim_leading_space,
            "lazy_quotes": self.lazy_quotes,
            "fields_per_record": self.fields_per_record,
            "encoding": self.encoding,
            "errors": self.errors,
            "buffer_size": self.buffer_size,
        }

    def replace(self, **overrides: Any) -> "DecoderConfig":
        """Return a copy with the given options changed."""
        options = self.to_dict()
        options.update(overrides)
        return DecoderConfig(**options)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DecoderConfig):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return (f"DecoderConfig(delimiter={chr(self.delimiter)!r}, "
                f"comment={None if self.comment is None else chr(self.comment)!r}, "
                f"trim_leading_space={self.trim_leading_space}, lazy_quotes={self.lazy_quotes}, "
                f"fields_per_record={self.fields_per_record}, encoding={self.encoding!r})")
