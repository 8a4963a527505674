"""
Standard MIDI file writer.

Renders a Pattern as a single-track (type 0) MIDI file, one sixteenth
note per step.

Note lengths:
    - plain step: three quarters of a step
    - slide step: one and a quarter steps, overlapping the next note
    - tied run: the step plus every following tied step, shortened by an
      eighth of a step unless the first step slides
"""

import io
import logging
from pathlib import Path
from typing import List, Tuple, Union

import mido

from tribeconv.errors import NilPatternError
from tribeconv.models.pattern import DEFAULT_TEMPO, MAX_STEPS, Pattern
from tribeconv.utils.validation import clamp_midi_value

logger = logging.getLogger(__name__)

DEFAULT_TICKS_PER_QUARTER = 480

# Largest tempo value a set_tempo event can hold (24 bits)
MAX_TEMPO_MICROSECONDS = 0xFFFFFF

# Sort order for events sharing a tick
_META, _NOTE_OFF, _NOTE_ON = 0, 1, 2

TimedEvent = Tuple[int, int, mido.Message]


class MidiWriter:
    """
    Writer for standard MIDI files.

    Example:
        MidiWriter.write(pattern, "bassline.mid")
        data = MidiWriter(ticks_per_quarter=96).to_bytes(pattern)
    """

    def __init__(self, ticks_per_quarter: int = DEFAULT_TICKS_PER_QUARTER, channel: int = 0):
        """
        Initialize writer.

        Args:
            ticks_per_quarter: File resolution
            channel: MIDI channel for note events (0-15)
        """
        self.ticks_per_quarter = ticks_per_quarter
        self.channel = channel & 0x0F

    @classmethod
    def write(cls, pattern: Pattern, filepath: Union[str, Path]) -> None:
        """
        Write a Pattern to a .mid file.

        Args:
            pattern: Pattern to write
            filepath: Output file path
        """
        writer = cls()
        data = writer.to_bytes(pattern)

        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        with open(filepath, "wb") as f:
            f.write(data)

    @property
    def ticks_per_step(self) -> int:
        return max(1, self.ticks_per_quarter // 4)

    def to_bytes(self, pattern: Pattern) -> bytes:
        """
        Convert Pattern to MIDI file data.

        Raises:
            NilPatternError: If pattern is None
        """
        buffer = io.BytesIO()
        self.to_midi_file(pattern).save(file=buffer)
        return buffer.getvalue()

    def to_midi_file(self, pattern: Pattern) -> mido.MidiFile:
        """
        Build a mido MidiFile for a Pattern.

        Raises:
            NilPatternError: If pattern is None
        """
        if pattern is None:
            raise NilPatternError()

        events = self.build_events(pattern)

        midi_file = mido.MidiFile(type=0, ticks_per_beat=self.ticks_per_quarter)
        track = mido.MidiTrack()
        midi_file.tracks.append(track)

        last_tick = 0
        for tick, _, msg in events:
            track.append(msg.copy(time=tick - last_tick))
            last_tick = tick

        track.append(mido.MetaMessage("end_of_track", time=0))

        logger.debug(
            "Encoded MIDI: %d events, %d ticks, %.2f BPM",
            len(events),
            last_tick,
            pattern.tempo,
        )
        return midi_file

    def build_events(self, pattern: Pattern) -> List[TimedEvent]:
        """
        Build (absolute tick, order, message) events sorted by time.

        Note-offs sort before note-ons on the same tick so a re-triggered
        pitch is released before it sounds again.
        """
        tps = self.ticks_per_step
        tempo = pattern.tempo if pattern.tempo and pattern.tempo > 0 else DEFAULT_TEMPO

        events: List[TimedEvent] = [
            (0, _META, mido.MetaMessage("set_tempo", tempo=self._tempo_value(tempo))),
            (
                0,
                _META,
                mido.MetaMessage(
                    "time_signature",
                    numerator=4,
                    denominator=4,
                    clocks_per_click=24,
                    notated_32nd_notes_per_beat=8,
                ),
            ),
        ]

        steps = pattern.steps
        for i, step in enumerate(steps):
            if not step.gate:
                continue
            # Continuation of the previous note
            if step.tie and i > 0:
                continue

            start = i * tps
            end = start + self.note_length(steps, i)
            note = clamp_midi_value(step.note)

            events.append(
                (
                    start,
                    _NOTE_ON,
                    mido.Message(
                        "note_on",
                        channel=self.channel,
                        note=note,
                        velocity=step.effective_velocity,
                    ),
                )
            )
            events.append(
                (end, _NOTE_OFF, mido.Message("note_off", channel=self.channel, note=note, velocity=0))
            )

        total = (len(steps) or MAX_STEPS) * tps
        if max(tick for tick, _, _ in events) < total:
            # Pads the track out to the full pattern length
            events.append((total, _META, mido.MetaMessage("marker", text="")))

        events.sort(key=lambda e: (e[0], e[1]))
        return events

    def note_length(self, steps, index: int) -> int:
        """Length in ticks of the note starting at steps[index]."""
        tps = self.ticks_per_step
        step = steps[index]

        length = (tps * 3) // 4 or max(1, tps - 1)
        if step.slide:
            length = tps + tps // 4

        tied = 0
        for following in steps[index + 1 :]:
            if not (following.tie and following.gate):
                break
            tied += 1

        if tied:
            length = tps * (tied + 1)
            if not step.slide:
                length -= tps // 8

        return length

    @staticmethod
    def _tempo_value(bpm: float) -> int:
        """Microseconds per quarter note, within the 24-bit field."""
        return max(1, min(MAX_TEMPO_MICROSECONDS, int(mido.bpm2tempo(bpm))))
