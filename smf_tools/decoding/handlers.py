"""Consumer interfaces and the dispatcher that drives them."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from .models import FileInfo, MetaEvent, MidiEvent, TrackAction


class SmfHandler:
    """Base class for parse consumers.

    Override only the hooks you need. Hooks left at these defaults are
    treated as absent, so the parser does not build event payloads that
    nobody will look at.
    """

    def on_file_info(self, info: FileInfo) -> None:
        pass

    def on_track_start(self, index: int) -> TrackAction:
        return TrackAction.PARSE

    def on_track_end(self, index: int) -> None:
        pass

    def on_meta_event(self, event: MetaEvent) -> None:
        pass

    def on_midi_event(self, event: MidiEvent) -> None:
        pass


@dataclass
class SmfCallbacks:
    """Closure-based handler; any hook may be left as ``None``."""

    on_file_info: Optional[Callable[[FileInfo], None]] = None
    on_track_start: Optional[Callable[[int], Optional[TrackAction]]] = None
    on_track_end: Optional[Callable[[int], Any]] = None
    on_meta_event: Optional[Callable[[MetaEvent], None]] = None
    on_midi_event: Optional[Callable[[MidiEvent], None]] = None


def _resolve_hook(handler: object, name: str) -> Optional[Callable[..., Any]]:
    if handler is None:
        return None
    hook = getattr(handler, name, None)
    if hook is None:
        return None
    if not callable(hook):
        raise TypeError(f"Handler attribute {name!r} is not callable.")
    if getattr(hook, "__func__", None) is getattr(SmfHandler, name):
        return None
    return hook


class Dispatcher:
    """Invoke the hooks a handler provides and ignore the ones it lacks."""

    __slots__ = ("_file_info", "_track_start", "_track_end", "_meta_event", "_midi_event")

    def __init__(self, handler: object = None):
        self._file_info = _resolve_hook(handler, "on_file_info")
        self._track_start = _resolve_hook(handler, "on_track_start")
        self._track_end = _resolve_hook(handler, "on_track_end")
        self._meta_event = _resolve_hook(handler, "on_meta_event")
        self._midi_event = _resolve_hook(handler, "on_midi_event")

    @property
    def wants_meta_events(self) -> bool:
        return self._meta_event is not None

    @property
    def wants_midi_events(self) -> bool:
        return self._midi_event is not None

    def file_info(self, info: FileInfo) -> None:
        if self._file_info is not None:
            self._file_info(info)

    def track_start(self, index: int) -> TrackAction:
        if self._track_start is None:
            return TrackAction.PARSE
        result = self._track_start(index)
        if result is None:
            return TrackAction.PARSE
        return TrackAction(result)

    def track_end(self, index: int) -> None:
        if self._track_end is not None:
            self._track_end(index)

    def meta_event(self, event: MetaEvent) -> None:
        if self._meta_event is not None:
            self._meta_event(event)

    def midi_event(self, event: MidiEvent) -> None:
        if self._midi_event is not None:
            self._midi_event(event)


__all__ = ["Dispatcher", "SmfCallbacks", "SmfHandler"]
