"""
Config - Tokenizer and binding settings.

A single default is built at import time and handed explicitly to every
tokenizer a parser creates.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class TokenizerConfig:
    """
    Settings shared by the tokenizer and the field binders.

    Attributes:
        auto_close_source: Close the underlying stream when the tokenizer
            is closed. Off by default; the caller owns the stream.
        ignore_unknown_properties: When binding objects to pydantic models,
            tolerate keys the model does not declare.
        chunk_size: Number of bytes read from the stream at a time.
        max_depth: Maximum container nesting accepted by the lexer.
    """

    auto_close_source: bool = False
    ignore_unknown_properties: bool = True
    chunk_size: int = 8192
    max_depth: int = 512

    def __post_init__(self):
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if self.max_depth <= 0:
            raise ValueError("max_depth must be positive")


DEFAULT_CONFIG = TokenizerConfig()
