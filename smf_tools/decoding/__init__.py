"""Public facade for the streaming SMF decoder."""

from .decoders import TrackDecoder, channel_message_length
from .errors import SmfError, SmfFormatError, SmfIoError
from .handlers import Dispatcher, SmfCallbacks, SmfHandler
from .models import (
    HEADER_MAGIC,
    TRACK_MAGIC,
    ChannelMessage,
    Division,
    FileFormat,
    FileInfo,
    MetaEvent,
    MetaType,
    MidiEvent,
    PpqnDivision,
    SmpteDivision,
    TrackAction,
)
from .reader import (
    SmfParser,
    decode_division,
    parse_bytes,
    parse_file,
    parse_stream,
    read_chunk_header,
    read_header,
)
from .streams import ByteCursor, ByteSource, FileSource, open_source, read_varlen

__all__ = [
    "ByteCursor",
    "ByteSource",
    "ChannelMessage",
    "Dispatcher",
    "Division",
    "FileFormat",
    "FileInfo",
    "FileSource",
    "HEADER_MAGIC",
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
    "TRACK_MAGIC",
    "TrackAction",
    "TrackDecoder",
    "channel_message_length",
    "decode_division",
    "open_source",
    "parse_bytes",
    "parse_file",
    "parse_stream",
    "read_chunk_header",
    "read_header",
    "read_varlen",
]
