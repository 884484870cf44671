"""Header parsing, chunk iteration and the public parse entry points."""
from __future__ import annotations

import logging
import os
from typing import Optional

from .decoders import TrackDecoder
from .errors import SmfError, SmfFormatError, SmfIoError
from .handlers import Dispatcher
from .models import (
    HEADER_MAGIC,
    TRACK_MAGIC,
    Division,
    FileFormat,
    FileInfo,
    PpqnDivision,
    SmpteDivision,
    TrackAction,
)
from .streams import ByteCursor, SourceLike, open_source

logger = logging.getLogger(__name__)


def decode_division(raw: int) -> Division:
    """Interpret the header's 16-bit division field."""

    high_byte = (raw >> 8) & 0xFF
    if high_byte & 0x80:
        return SmpteDivision(
            frames_per_second_code=high_byte - 0x100,
            subframe_ticks=raw & 0xFF,
        )
    return PpqnDivision(ticks_per_quarter=raw)


def read_chunk_header(cursor: ByteCursor) -> tuple[bytes, int]:
    """Read an 8-byte chunk preamble, returning its type tag and length."""

    preamble = cursor.read_exact(8)
    return preamble[:4], int.from_bytes(preamble[4:8], "big")


def read_header(cursor: ByteCursor) -> FileInfo:
    """Read the ``MThd`` chunk at the start of the stream."""

    try:
        magic = cursor.read_exact(4)
    except SmfIoError as exc:
        raise SmfFormatError("Truncated MIDI header.") from exc
    if magic != HEADER_MAGIC:
        raise SmfFormatError(f"Invalid MIDI header tag {magic!r}.")

    try:
        body = cursor.read_exact(10)
    except SmfIoError as exc:
        raise SmfFormatError("Truncated MIDI header.") from exc

    # body[0:4] is the header length, which is not used for bounding
    format_code = int.from_bytes(body[4:6], "big")
    num_tracks = int.from_bytes(body[6:8], "big")
    division = int.from_bytes(body[8:10], "big")

    try:
        file_format = FileFormat(format_code)
    except ValueError as exc:
        raise SmfFormatError(f"Unsupported MIDI file format {format_code}.") from exc

    return FileInfo(
        format=file_format,
        num_tracks=num_tracks,
        division=decode_division(division),
    )


class SmfParser:
    """Single-pass decoder that reports a MIDI file through a handler.

    The handler may be an :class:`~smf_tools.decoding.handlers.SmfHandler`
    subclass, an :class:`~smf_tools.decoding.handlers.SmfCallbacks` instance,
    any object exposing some of the hook methods, or ``None``.
    """

    def __init__(self, handler: object = None):
        self._dispatcher = Dispatcher(handler)
        self._file_info: Optional[FileInfo] = None

    @property
    def file_info(self) -> Optional[FileInfo]:
        """Header metadata from the most recent parse, once it has been read."""

        return self._file_info

    def parse(self, source: SourceLike) -> FileInfo:
        self._file_info = None
        cursor = ByteCursor(open_source(source))
        info = read_header(cursor)
        self._file_info = info
        logger.debug(
            "Reading a format %d MIDI file with %d tracks (%s)",
            int(info.format),
            info.num_tracks,
            info.division,
        )
        self._dispatcher.file_info(info)

        track_index = 0
        try:
            while track_index < info.num_tracks:
                try:
                    chunk_type, length = read_chunk_header(cursor)
                except SmfIoError as exc:
                    raise SmfFormatError(
                        f"Truncated MIDI file: found {track_index} of "
                        f"{info.num_tracks} track chunks."
                    ) from exc

                if chunk_type != TRACK_MAGIC:
                    logger.debug("Skipping %d-byte %r chunk", length, chunk_type)
                    cursor.skip(length)
                    continue

                self._read_track(cursor, track_index, length)
                track_index += 1
        except SmfError as exc:
            logger.warning("Failed reading MIDI track %d: %s", track_index, exc)
            raise
        return info

    def _read_track(self, cursor: ByteCursor, track_index: int, length: int) -> None:
        dispatcher = self._dispatcher
        action = dispatcher.track_start(track_index)
        try:
            if action is TrackAction.SKIP:
                logger.debug("Skipping track %d (%d bytes) at handler request", track_index, length)
                cursor.skip(length)
            else:
                TrackDecoder.decode(cursor.limit(length), dispatcher, track_index=track_index)
        finally:
            dispatcher.track_end(track_index)


def parse_stream(source: SourceLike, handler: object = None) -> FileInfo:
    """Decode ``source`` and report its contents to ``handler``."""

    return SmfParser(handler).parse(source)


def parse_bytes(data: bytes, handler: object = None) -> FileInfo:
    return SmfParser(handler).parse(bytes(data))


def parse_file(path: str | os.PathLike[str], handler: object = None) -> FileInfo:
    """Open ``path`` in binary mode and decode it."""

    with open(path, "rb") as handle:
        return SmfParser(handler).parse(handle)


__all__ = [
    "SmfParser",
    "decode_division",
    "parse_bytes",
    "parse_file",
    "parse_stream",
    "read_chunk_header",
    "read_header",
]
