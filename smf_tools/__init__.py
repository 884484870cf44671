from .decoding import (
    ChannelMessage,
    FileFormat,
    FileInfo,
    MetaEvent,
    MetaType,
    MidiEvent,
    PpqnDivision,
    SmfCallbacks,
    SmfError,
    SmfFormatError,
    SmfHandler,
    SmfIoError,
    SmfParser,
    SmpteDivision,
    TrackAction,
    parse_bytes,
    parse_file,
    parse_stream,
)

__all__ = [
    "ChannelMessage",
    "FileFormat",
    "FileInfo",
    "MetaEvent",
    "MetaType",
    "MidiEvent",
    "PpqnDivision",
    "SmfCallbacks",
    "SmfError",
    "SmfFormatError",
    "SmfHandler",
    "SmfIoError",
    "SmfParser",
    "SmpteDivision",
    "TrackAction",
    "parse_bytes",
    "parse_file",
    "parse_stream",
]
