"""Data models produced by the SMF decoder."""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Union

from ..config import get_meta_config

HEADER_MAGIC = b"MThd"
TRACK_MAGIC = b"MTrk"


class FileFormat(IntEnum):
    """Track layout declared by the header chunk."""

    ONE_TRACK = 0
    MANY_TRACKS = 1
    MANY_PATTERNS = 2


class TrackAction(IntEnum):
    """Answer from ``on_track_start`` telling the parser what to do next."""

    PARSE = 0
    SKIP = 1


class ChannelMessage(IntEnum):
    """High nibble of a channel voice/mode status byte."""

    NOTE_OFF = 0x80
    NOTE_ON = 0x90
    POLY_KEY_PRESSURE = 0xA0
    CONTROL_CHANGE = 0xB0
    PROGRAM_CHANGE = 0xC0
    CHANNEL_PRESSURE = 0xD0
    PITCH_BEND = 0xE0


class MetaType(IntEnum):
    """Registered meta-event type codes."""

    SEQUENCE_NUMBER = 0x00
    TEXT_EVENT = 0x01
    COPYRIGHT_NOTICE = 0x02
    TRACK_NAME = 0x03
    INSTRUMENT_NAME = 0x04
    LYRIC = 0x05
    MARKER = 0x06
    CUE_POINT = 0x07
    MIDI_CHANNEL = 0x20
    END_OF_TRACK = 0x2F
    SET_TEMPO = 0x51
    SMPTE_OFFSET = 0x54
    TIME_SIGNATURE = 0x58
    KEY_SIGNATURE = 0x59
    SEQUENCER_SPECIFIC = 0x7F

    @property
    def is_text(self) -> bool:
        return MetaType.TEXT_EVENT <= self <= MetaType.CUE_POINT


@dataclass(frozen=True)
class PpqnDivision:
    """Metrical timing: delta-times count ticks of a quarter note."""

    ticks_per_quarter: int


@dataclass(frozen=True)
class SmpteDivision:
    """Time-code timing: delta-times count subframes of an SMPTE frame.

    ``frames_per_second_code`` keeps the signed value stored in the file
    (-24, -25, -29 or -30); :attr:`frames_per_second` is its magnitude.
    """

    frames_per_second_code: int
    subframe_ticks: int

    @property
    def frames_per_second(self) -> int:
        return -self.frames_per_second_code


Division = Union[PpqnDivision, SmpteDivision]


@dataclass(frozen=True)
class FileInfo:
    """Header metadata, fixed for the rest of a parse."""

    format: FileFormat
    num_tracks: int
    division: Division


@dataclass(frozen=True)
class MidiEvent:
    """A channel message in explicit status form (running status expanded)."""

    delta: int
    data: bytes

    @property
    def status(self) -> int:
        return self.data[0]

    @property
    def channel(self) -> int:
        return self.data[0] & 0x0F

    @property
    def message_type(self) -> ChannelMessage:
        return ChannelMessage(self.data[0] & 0xF0)

    @property
    def note(self) -> Optional[int]:
        if self.message_type in (
            ChannelMessage.NOTE_OFF,
            ChannelMessage.NOTE_ON,
            ChannelMessage.POLY_KEY_PRESSURE,
        ):
            return self.data[1]
        return None

    @property
    def velocity(self) -> Optional[int]:
        if self.message_type in (ChannelMessage.NOTE_OFF, ChannelMessage.NOTE_ON):
            return self.data[2]
        return None


@dataclass(frozen=True)
class MetaEvent:
    """A meta event with its raw payload and, for some types, a decoded value.

    ``cooked`` carries the channel number for MIDI channel prefix events and
    the tempo in beats per minute for set-tempo events.
    """

    delta: int
    meta_type: int
    payload: bytes = b""
    cooked: Union[int, float, None] = None

    @property
    def kind(self) -> Optional[MetaType]:
        try:
            return MetaType(self.meta_type)
        except ValueError:
            return None

    @property
    def type_name(self) -> str:
        kind = self.kind
        if kind is None:
            return f"UNKNOWN_0x{self.meta_type:02X}"
        return kind.name

    def text(self, encoding: str | None = None) -> str:
        """Decode the payload as text, stopping at the first NUL byte."""

        codec = encoding or get_meta_config().text_encoding
        raw = self.payload.split(b"\x00", 1)[0]
        return raw.decode(codec, errors="replace")


def cook_meta_payload(meta_type: int, payload: bytes) -> Union[int, float, None]:
    """Return the decoded value for channel prefix and tempo meta events."""

    if meta_type == MetaType.MIDI_CHANNEL and payload:
        return payload[0]
    if meta_type == MetaType.SET_TEMPO and len(payload) >= 3:
        microseconds = int.from_bytes(payload[:3], "big", signed=False)
        if microseconds > 0:
            return 60_000_000.0 / float(microseconds)
    return None


__all__ = [
    "ChannelMessage",
    "Division",
    "FileFormat",
    "FileInfo",
    "HEADER_MAGIC",
    "MetaEvent",
    "MetaType",
    "MidiEvent",
    "PpqnDivision",
    "SmpteDivision",
    "TRACK_MAGIC",
    "TrackAction",
    "cook_meta_payload",
]
