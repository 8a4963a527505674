"""Standard MIDI file format handlers."""

from tribeconv.formats.midi.reader import (
    MidiReader,
    NoteEvent,
    infer_articulation,
    quantize_events,
    scan_tracks,
)
from tribeconv.formats.midi.writer import MidiWriter

__all__ = [
    "MidiReader",
    "MidiWriter",
    "NoteEvent",
    "infer_articulation",
    "quantize_events",
    "scan_tracks",
]
