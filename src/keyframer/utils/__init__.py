"""Utilities: configuration and logging setup."""

from keyframer.utils.config import KeyframerConfig, load_config

__all__ = ["KeyframerConfig", "load_config"]
