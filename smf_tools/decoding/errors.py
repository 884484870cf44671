"""Exception types raised while decoding Standard MIDI Files."""
from __future__ import annotations


class SmfError(Exception):
    """Base class for every error raised by the SMF decoder."""


class SmfFormatError(SmfError, ValueError):
    """The byte stream does not follow the Standard MIDI File layout."""


class SmfIoError(SmfError, OSError):
    """The byte source ran dry or failed while reading."""


__all__ = ["SmfError", "SmfFormatError", "SmfIoError"]
