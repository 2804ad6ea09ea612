from dotenv import load_dotenv
import os

load_dotenv()


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return int(value)


class Config:
    """Decoder defaults taken from CSVSTREAM_* environment variables (and a .env file)."""

    def __init__(self):
        self.CSVSTREAM_DELIMITER = os.getenv("CSVSTREAM_DELIMITER") or ","
        self.CSVSTREAM_COMMENT = os.getenv("CSVSTREAM_COMMENT") or None
        self.CSVSTREAM_TRIM_LEADING_SPACE = _env_flag("CSVSTREAM_TRIM_LEADING_SPACE")
        self.CSVSTREAM_LAZY_QUOTES = _env_flag("CSVSTREAM_LAZY_QUOTES")
        self.CSVSTREAM_FIELDS_PER_RECORD = _env_int("CSVSTREAM_FIELDS_PER_RECORD", 0)
        self.CSVSTREAM_ENCODING = os.getenv("CSVSTREAM_ENCODING") or "utf-8"
        self.CSVSTREAM_BUFFER_SIZE = _env_int("CSVSTREAM_BUFFER_SIZE", 4096)

config = Config()
