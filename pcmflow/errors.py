"""Errors raised when building a decoder, and the MP4 container hints."""

from __future__ import annotations

import enum


class DecoderError(Exception):
    """Raised when a decoder cannot be built for some data."""


class UnrecognizedFormatError(DecoderError):
    """The format of the data has not been recognized."""

    def __init__(self, message: str = "Unrecognized format") -> None:
        super().__init__(message)


class Mp4Type(enum.Enum):
    """File extensions that name a flavour of the MP4 container."""

    MP4 = "mp4"
    M4A = "m4a"
    M4P = "m4p"
    M4B = "m4b"
    M4R = "m4r"
    M4V = "m4v"
    MOV = "mov"

    @classmethod
    def from_str(cls, text: str) -> Mp4Type:
        """Parse an extension, ignoring case."""
        try:
            return cls(text.lower())
        except ValueError:
            raise ValueError(f"{text} is not a valid mp4 extension") from None

    def __str__(self) -> str:
        return self.value