from .config import Config, config
from .decoder_config import DecoderConfig

__all__ = [
    "Config",
    "config",
    "DecoderConfig",
]
