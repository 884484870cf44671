"""Event decoding for the body of a single ``MTrk`` chunk."""
from __future__ import annotations

import logging

from .errors import SmfFormatError
from .handlers import Dispatcher
from .models import MetaEvent, MidiEvent, cook_meta_payload
from .streams import ByteCursor

logger = logging.getLogger(__name__)

_META_STATUS = 0xFF
_SYSEX_STATUSES = (0xF0, 0xF7)
_SYSTEM_COMMON_RANGE = range(0xF1, 0xF7)


def channel_message_length(status: int) -> int:
    """Number of data bytes following a channel status byte."""

    message_type = status & 0xF0
    if message_type in (0x80, 0x90, 0xA0, 0xB0, 0xE0):
        return 2
    if message_type in (0xC0, 0xD0):
        return 1
    return 0


class TrackDecoder:
    """Decode one track's events and hand them to a :class:`Dispatcher`.

    The cursor must be bounded to the chunk's declared length; decoding
    stops once that budget is spent.
    """

    def __init__(self, cursor: ByteCursor, dispatcher: Dispatcher, *, track_index: int = 0):
        if cursor.remaining is None:
            raise ValueError("Track decoding needs a cursor bounded to the chunk length.")
        self.cursor = cursor
        self.dispatcher = dispatcher
        self.track_index = track_index
        self.running_status: int | None = None
        self.event_count = 0

    @classmethod
    def decode(cls, cursor: ByteCursor, dispatcher: Dispatcher, *, track_index: int = 0) -> int:
        """Decode every event in ``cursor`` and return how many were read."""

        decoder = cls(cursor, dispatcher, track_index=track_index)
        decoder._decode()
        logger.debug("Track %d: decoded %d events", track_index, decoder.event_count)
        return decoder.event_count

    def _decode(self) -> None:
        cursor = self.cursor
        while cursor.remaining:
            delta = cursor.read_varlen()
            status = cursor.read_byte()
            self.event_count += 1

            if status == _META_STATUS:
                self._parse_meta(delta)
                continue

            if status in _SYSEX_STATUSES:
                self._parse_sysex()
                continue

            if status in _SYSTEM_COMMON_RANGE:
                self.running_status = None
                continue

            self._parse_channel_message(delta, status)

    def _parse_meta(self, delta: int) -> None:
        cursor = self.cursor
        meta_type = cursor.read_byte()
        length = cursor.read_varlen()
        if length > cursor.remaining:
            raise SmfFormatError(
                f"Meta event 0x{meta_type:02X} declares {length} bytes but only "
                f"{cursor.remaining} remain in track {self.track_index}."
            )

        if not self.dispatcher.wants_meta_events:
            cursor.skip(length)
            return

        payload = cursor.read_exact(length)
        event = MetaEvent(
            delta=delta,
            meta_type=meta_type,
            payload=payload,
            cooked=cook_meta_payload(meta_type, payload),
        )
        self.dispatcher.meta_event(event)

    def _parse_sysex(self) -> None:
        cursor = self.cursor
        length = cursor.read_varlen()
        cursor.skip(length)
        logger.debug("Track %d: skipped %d-byte sysex event", self.track_index, length)

    def _parse_channel_message(self, delta: int, first_byte: int) -> None:
        cursor = self.cursor
        if first_byte & 0x80:
            status = first_byte
            self.running_status = status
            to_read = channel_message_length(status)
            if to_read == 0:
                raise SmfFormatError(
                    f"Unsupported status byte 0x{status:02X} in track {self.track_index}."
                )
            data = bytearray((status,))
        else:
            status = self.running_status
            if status is None:
                raise SmfFormatError(
                    f"Running status data byte 0x{first_byte:02X} before any status byte "
                    f"in track {self.track_index}."
                )
            to_read = channel_message_length(status) - 1
            data = bytearray((status, first_byte))

        if not self.dispatcher.wants_midi_events:
            cursor.skip(to_read)
            return

        data.extend(cursor.read_exact(to_read))

        # zero-velocity note-on is a note-off
        if data[0] & 0xF0 == 0x90 and data[2] == 0x00:
            data[0] = 0x80 | (data[0] & 0x0F)

        self.dispatcher.midi_event(MidiEvent(delta=delta, data=bytes(data)))


__all__ = ["TrackDecoder", "channel_message_length"]
