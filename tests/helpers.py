"""Builders for Standard MIDI File byte strings and a recording handler."""
from __future__ import annotations

import struct
from typing import Iterable

from smf_tools.decoding import FileInfo, MetaEvent, MidiEvent, SmfHandler, TrackAction


def vlq(value: int) -> bytes:
    buffer = [value & 0x7F]
    value >>= 7
    while value:
        buffer.append((value & 0x7F) | 0x80)
        value >>= 7
    return bytes(reversed(buffer))


def chunk(tag: bytes, body: bytes) -> bytes:
    return tag + struct.pack(">I", len(body)) + body


def header_chunk(*, fmt: int = 1, num_tracks: int = 1, division: int = 480) -> bytes:
    return chunk(b"MThd", struct.pack(">HHH", fmt, num_tracks, division))


def track_chunk(body: bytes) -> bytes:
    return chunk(b"MTrk", body)


def end_of_track(delta: int = 0) -> bytes:
    return vlq(delta) + bytes([0xFF, 0x2F, 0x00])


def make_smf(*tracks: bytes, fmt: int = 1, division: int = 480) -> bytes:
    """Build a file whose header counts exactly the given track bodies."""

    body = b"".join(track_chunk(track) for track in tracks)
    return header_chunk(fmt=fmt, num_tracks=len(tracks), division=division) + body


class RecordingHandler(SmfHandler):
    """Collects every callback as a ``(name, payload)`` tuple."""

    def __init__(self, skip_tracks: Iterable[int] = ()):
        self.calls: list[tuple[str, object]] = []
        self.skip_tracks = set(skip_tracks)

    def on_file_info(self, info: FileInfo) -> None:
        self.calls.append(("file_info", info))

    def on_track_start(self, index: int) -> TrackAction:
        self.calls.append(("track_start", index))
        if index in self.skip_tracks:
            return TrackAction.SKIP
        return TrackAction.PARSE

    def on_track_end(self, index: int) -> None:
        self.calls.append(("track_end", index))

    def on_meta_event(self, event: MetaEvent) -> None:
        self.calls.append(("meta", event))

    def on_midi_event(self, event: MidiEvent) -> None:
        self.calls.append(("midi", event))

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def events(self, name: str) -> list:
        return [payload for call_name, payload in self.calls if call_name == name]
