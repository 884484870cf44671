"""Byte sources and the budgeted cursor shared by the SMF decoders."""
from __future__ import annotations

import io
from typing import BinaryIO, Protocol, Union, runtime_checkable

from ..config import get_source_config
from .errors import SmfFormatError, SmfIoError


@runtime_checkable
class ByteSource(Protocol):
    """Sequential reader the decoder pulls bytes from."""

    def read_exact(self, size: int) -> bytes: ...

    def skip(self, size: int) -> None: ...


SourceLike = Union[ByteSource, BinaryIO, bytes, bytearray, memoryview]


class FileSource:
    """Adapt a binary file object to :class:`ByteSource`.

    Seekable handles skip with a forward seek; anything else is drained
    through a reusable scratch buffer.
    """

    __slots__ = ("_handle", "_position", "_block_size", "_scratch", "_end")

    def __init__(self, handle: BinaryIO, *, block_size: int | None = None):
        self._handle = handle
        self._position = 0
        self._block_size = block_size or get_source_config().skip_block_size
        self._scratch: bytearray | None = None
        self._end: int | None = None

    def tell(self) -> int:
        return self._position

    def read_exact(self, size: int) -> bytes:
        if size < 0:
            raise ValueError("Size must be non-negative.")
        pieces: list[bytes] = []
        remaining = size
        while remaining > 0:
            try:
                piece = self._handle.read(remaining)
            except OSError as exc:
                raise SmfIoError(f"Failed reading MIDI data at byte {self._position}.") from exc
            if not piece:
                raise SmfIoError(
                    f"Unexpected end of MIDI data at byte {self._position}: "
                    f"needed {remaining} more of {size} bytes."
                )
            pieces.append(piece)
            remaining -= len(piece)
            self._position += len(piece)
        return b"".join(pieces)

    def skip(self, size: int) -> None:
        if size < 0:
            raise ValueError("Size must be non-negative.")
        if size == 0:
            return
        try:
            if self._is_seekable():
                self._seek_forward(size)
            else:
                self._discard(size)
        except SmfIoError:
            raise
        except OSError as exc:
            raise SmfIoError(f"Failed skipping MIDI data at byte {self._position}.") from exc

    def _is_seekable(self) -> bool:
        seekable = getattr(self._handle, "seekable", None)
        if not callable(seekable):
            return False
        try:
            return bool(seekable())
        except (OSError, ValueError):
            return False

    def _seek_forward(self, size: int) -> None:
        handle = self._handle
        current = handle.tell()
        if self._end is None:
            self._end = handle.seek(0, io.SEEK_END)
            handle.seek(current, io.SEEK_SET)
        if current + size > self._end:
            raise SmfIoError(
                f"Unexpected end of MIDI data at byte {self._position}: "
                f"cannot skip {size} bytes."
            )
        handle.seek(size, io.SEEK_CUR)
        self._position += size

    def _discard(self, size: int) -> None:
        if self._scratch is None:
            self._scratch = bytearray(self._block_size)
        view = memoryview(self._scratch)
        readinto = getattr(self._handle, "readinto", None)
        remaining = size
        while remaining > 0:
            wanted = min(remaining, len(view))
            if readinto is not None:
                count = readinto(view[:wanted]) or 0
            else:
                count = len(self._handle.read(wanted))
            if count <= 0:
                raise SmfIoError(
                    f"Unexpected end of MIDI data at byte {self._position}: "
                    f"cannot skip {remaining} more bytes."
                )
            remaining -= count
            self._position += count


def open_source(source: SourceLike) -> ByteSource:
    """Wrap ``source`` so the decoder can read from it sequentially."""

    if isinstance(source, (bytes, bytearray, memoryview)):
        return FileSource(io.BytesIO(bytes(source)))
    if isinstance(source, ByteSource):
        return source
    if hasattr(source, "read"):
        return FileSource(source)
    raise TypeError(f"Cannot read MIDI data from {type(source).__name__}.")


class ByteCursor:
    """Forward reader over a :class:`ByteSource` with an optional byte budget.

    A cursor built with ``budget=None`` is unbounded. :meth:`limit` opens a
    nested scope whose consumption is also charged to this cursor.
    """

    __slots__ = ("_source", "_remaining", "_consumed")

    def __init__(self, source: ByteSource, budget: int | None = None):
        if budget is not None and budget < 0:
            raise ValueError("Budget must be non-negative.")
        self._source = source
        self._remaining = budget
        self._consumed = 0

    @property
    def remaining(self) -> int | None:
        return self._remaining

    def tell(self) -> int:
        return self._consumed

    def limit(self, size: int) -> "ByteCursor":
        return ByteCursor(self, size)

    def read_exact(self, size: int) -> bytes:
        self._charge(size)
        return self._source.read_exact(size)

    def read_byte(self) -> int:
        return self.read_exact(1)[0]

    def skip(self, size: int) -> None:
        self._charge(size)
        self._source.skip(size)

    def read_varlen(self) -> int:
        value, _ = read_varlen(self)
        return value

    def _charge(self, size: int) -> None:
        if size < 0:
            raise ValueError("Size must be non-negative.")
        if self._remaining is not None:
            if size > self._remaining:
                raise SmfFormatError(
                    f"Read of {size} bytes overruns the {self._remaining} bytes "
                    f"left in the chunk (offset {self._consumed})."
                )
            self._remaining -= size
        self._consumed += size


def read_varlen(cursor: ByteCursor) -> tuple[int, int]:
    """Decode a variable-length quantity, returning ``(value, bytes_consumed)``."""

    value = 0
    consumed = 0
    while True:
        if cursor.remaining == 0:
            raise SmfFormatError("Variable-length quantity runs past the end of its chunk.")
        byte = cursor.read_byte()
        value = (value << 7) | (byte & 0x7F)
        consumed += 1
        if byte & 0x80 == 0:
            return value, consumed


__all__ = ["ByteCursor", "ByteSource", "FileSource", "SourceLike", "open_source", "read_varlen"]
