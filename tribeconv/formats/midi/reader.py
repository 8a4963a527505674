"""
Standard MIDI file reader.

Quantizes the note-on events of a MIDI file onto a 16-step grid of
sixteenth notes and infers slide and tie flags from neighbouring steps.

The pipeline is three pure stages, each testable on its own:

1. scan_tracks: fold every track's messages into absolute-tick note events
   and the last tempo seen
2. quantize_events: place note-ons on the grid, last one per step wins
3. infer_articulation: mark slides and ties from adjacent gated steps

Slide/tie inference is a heuristic. Steps a semitone or a whole tone
apart are assumed to glide, equal pitches are assumed to sustain. It does
not reconstruct the original performance intent.
"""

import io
import logging
from dataclasses import dataclass, field
from functools import reduce
from pathlib import Path
from typing import Iterable, Iterator, List, Tuple, Union

import mido

from tribeconv.errors import ParseError
from tribeconv.models.pattern import DEFAULT_TEMPO, MAX_STEPS, Pattern, Step

logger = logging.getLogger(__name__)

DEFAULT_TICKS_PER_QUARTER = 480

# Velocities above this mark an accented step
ACCENT_THRESHOLD = 100


@dataclass(frozen=True)
class NoteEvent:
    """A note-on or note-off at an absolute tick position."""

    tick: int
    note: int
    velocity: int
    on: bool


@dataclass
class MidiScan:
    """Accumulator for scan_tracks."""

    events: List[NoteEvent] = field(default_factory=list)
    tempo: float = DEFAULT_TEMPO


def iter_absolute(track: Iterable[mido.Message]) -> Iterator[Tuple[int, mido.Message]]:
    """Yield (absolute tick, message) pairs for one track."""
    tick = 0
    for msg in track:
        tick += msg.time
        yield tick, msg


def _fold_message(scan: MidiScan, item: Tuple[int, mido.Message]) -> MidiScan:
    tick, msg = item

    if msg.type == "set_tempo":
        if msg.tempo > 0:
            scan.tempo = mido.tempo2bpm(msg.tempo)
    elif msg.type == "note_on" and msg.velocity > 0:
        scan.events.append(NoteEvent(tick, msg.note, msg.velocity, True))
    elif msg.type in ("note_on", "note_off"):
        scan.events.append(NoteEvent(tick, msg.note, 0, False))

    return scan


def scan_tracks(tracks: Iterable[Iterable[mido.Message]], tempo: float = DEFAULT_TEMPO) -> MidiScan:
    """
    Collect note events from all tracks.

    Tick positions restart at zero for every track. Events are kept in
    track order, then message order.

    Args:
        tracks: Tracks of delta-timed messages
        tempo: Tempo to report when the file has no tempo event

    Returns:
        MidiScan with note events and the last tempo seen
    """
    timed = (item for track in tracks for item in iter_absolute(track))
    return reduce(_fold_message, timed, MidiScan(tempo=tempo))


def quantize_events(events: Iterable[NoteEvent], ticks_per_step: int) -> List[Step]:
    """
    Place note-on events on a 16-step grid.

    Args:
        events: Note events in scan order
        ticks_per_step: Grid resolution in ticks

    Returns:
        16 steps; steps without a note-on are rests
    """
    steps = [Step() for _ in range(MAX_STEPS)]

    for event in events:
        if not event.on:
            continue

        index = (event.tick // ticks_per_step) % MAX_STEPS
        steps[index] = Step(
            note=event.note,
            gate=True,
            velocity=event.velocity,
            accent=event.velocity > ACCENT_THRESHOLD,
        )

    return steps


def infer_articulation(steps: List[Step]) -> List[Step]:
    """
    Mark slides and ties by comparing each step with the next one.

    When both steps are gated, the earlier step gets `slide` if the pitches
    differ by one or two semitones and `tie` if they are equal.

    Args:
        steps: Quantized steps, modified in place

    Returns:
        The same list
    """
    for current, following in zip(steps, steps[1:]):
        if not (current.gate and following.gate):
            continue

        distance = abs(following.note - current.note)
        if 1 <= distance <= 2:
            current.slide = True
        elif distance == 0:
            current.tie = True

    return steps


class MidiReader:
    """
    Reader for standard MIDI files.

    Example:
        pattern = MidiReader.read("bassline.mid")
        print(f"Tempo: {pattern.tempo}")
    """

    PATTERN_NAME = "MIDI Pattern"

    def __init__(self, default_ticks_per_quarter: int = DEFAULT_TICKS_PER_QUARTER):
        self.default_ticks_per_quarter = default_ticks_per_quarter
        self.ticks_per_quarter = default_ticks_per_quarter

    @classmethod
    def read(cls, filepath: Union[str, Path]) -> Pattern:
        reader = cls()
        return reader.parse_file(filepath)

    def parse_file(self, filepath: Union[str, Path]) -> Pattern:
        filepath = Path(filepath)

        if not filepath.exists():
            raise FileNotFoundError(f"File not found: {filepath}")

        with open(filepath, "rb") as f:
            data = f.read()

        return self.parse_bytes(data)

    def load(self, data: bytes) -> mido.MidiFile:
        """
        Parse a MIDI container.

        Raises:
            ParseError: If mido cannot read the data
        """
        try:
            return mido.MidiFile(file=io.BytesIO(data))
        except Exception as exc:
            raise ParseError(f"failed to parse MIDI: {exc}") from exc

    def parse_bytes(self, data: bytes) -> Pattern:
        """
        Parse MIDI data into a 16-step Pattern.

        Args:
            data: Raw MIDI file contents

        Returns:
            Pattern with 16 steps

        Raises:
            ParseError: If the data is not a readable MIDI file
        """
        midi_file = self.load(data)

        self.ticks_per_quarter = self._resolution(midi_file)
        ticks_per_step = max(1, self.ticks_per_quarter // 4)

        scan = scan_tracks(midi_file.tracks)
        steps = infer_articulation(quantize_events(scan.events, ticks_per_step))

        logger.debug(
            "Decoded MIDI: %d tracks, %d note events, %d ticks/step, %.2f BPM",
            len(midi_file.tracks),
            len(scan.events),
            ticks_per_step,
            scan.tempo,
        )

        return Pattern(
            name=self.PATTERN_NAME,
            steps=steps,
            length=MAX_STEPS,
            tempo=scan.tempo,
            source_format="midi",
        )

    def _resolution(self, midi_file: mido.MidiFile) -> int:
        """Ticks per quarter note, falling back for SMPTE or empty divisions."""
        ticks = midi_file.ticks_per_beat
        if ticks is None or ticks <= 0 or ticks & 0x8000:
            logger.debug(
                "Non-metric time division %r, using %d", ticks, self.default_ticks_per_quarter
            )
            return self.default_ticks_per_quarter
        return ticks
