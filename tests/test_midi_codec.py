"""Tests for MIDI quantization and rendering."""

import io

import mido
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from conftest import build_midi

import tribeconv
from tribeconv.errors import NilPatternError, ParseError
from tribeconv.formats.midi import (
    MidiReader,
    MidiWriter,
    NoteEvent,
    infer_articulation,
    quantize_events,
    scan_tracks,
)
from tribeconv.models.pattern import Pattern, Step


def raw_midi(division, track):
    """Single-track format 0 file from a raw division word and track body."""
    header = b"MThd" + (6).to_bytes(4, "big") + b"\x00\x00\x00\x01" + division
    return header + b"MTrk" + len(track).to_bytes(4, "big") + track


def note_spans(data):
    """Return (start, end, note, velocity) for every note in a MIDI file."""
    midi_file = mido.MidiFile(file=io.BytesIO(data))
    spans, open_notes, tick = [], {}, 0
    for msg in midi_file.tracks[0]:
        tick += msg.time
        if msg.type == "note_on" and msg.velocity > 0:
            open_notes[msg.note] = (tick, msg.velocity)
        elif msg.type in ("note_on", "note_off"):
            start, velocity = open_notes.pop(msg.note)
            spans.append((start, tick, msg.note, velocity))
    return sorted(spans)


class TestScanAndQuantize:
    """Test cases for the individual decode stages."""

    def test_scan_absolute_ticks(self):
        """Delta times accumulate per track."""
        track = [
            mido.Message("note_on", note=60, velocity=90, time=0),
            mido.Message("note_off", note=60, velocity=0, time=100),
            mido.Message("note_on", note=62, velocity=0, time=20),
        ]
        scan = scan_tracks([track])

        assert scan.events == [
            NoteEvent(0, 60, 90, True),
            NoteEvent(100, 60, 0, False),
            NoteEvent(120, 62, 0, False),
        ]
        assert scan.tempo == 120.0

    def test_scan_tempo(self):
        """A set_tempo event updates the tempo."""
        track = [mido.MetaMessage("set_tempo", tempo=500_000 * 120 // 150, time=0)]

        assert scan_tracks([track]).tempo == pytest.approx(150.0)

    def test_quantize_wraps_and_last_wins(self):
        """Step index is (tick // ticks_per_step) % 16, last note-on wins."""
        events = [
            NoteEvent(0, 60, 100, True),
            NoteEvent(16 * 120, 48, 110, True),
            NoteEvent(130, 62, 80, True),
        ]
        steps = quantize_events(events, 120)

        assert steps[0].note == 48
        assert steps[0].accent
        assert steps[1].note == 62
        assert steps[1].velocity == 80
        assert not steps[1].accent
        assert not steps[2].gate

    def test_infer_articulation(self):
        """Close pitches slide, equal pitches tie, rests break the chain."""
        steps = [
            Step(60, gate=True),
            Step(62, gate=True),
            Step(65, gate=True),
            Step(65, gate=True),
            Step(),
            Step(65, gate=True),
        ]
        infer_articulation(steps)

        assert steps[0].slide
        assert not steps[1].slide
        assert not steps[1].tie
        assert steps[2].tie
        assert not steps[2].slide
        assert not steps[3].tie


class TestMidiReader:
    """Test cases for MIDI decoding."""

    def test_single_note(self, single_note_midi):
        """One note at tick 0 fills step 0 only."""
        pattern = MidiReader().parse_bytes(single_note_midi)

        assert len(pattern.steps) == 16
        assert pattern.steps[0].note == 60
        assert pattern.steps[0].gate
        assert not any(s.gate for s in pattern.steps[1:])
        assert pattern.source_format == "midi"

    def test_bassline(self, bassline_midi):
        """Test accents, slides, ties and tempo from a short line."""
        pattern = MidiReader().parse_bytes(bassline_midi)
        steps = pattern.steps

        assert [s.note for s in steps[:4]] == [60, 62, 64, 64]
        assert steps[1].accent
        assert steps[0].slide
        assert steps[1].slide
        assert steps[2].tie
        assert pattern.tempo == pytest.approx(140.0, abs=0.01)

    def test_resolution(self):
        """Ticks per step follow the file's division."""
        data = build_midi([(0, 20, 60, 100), (48, 60, 67, 100)], ticks_per_beat=96)
        reader = MidiReader()
        pattern = reader.parse_bytes(data)

        assert reader.ticks_per_quarter == 96
        assert pattern.steps[2].note == 67

    def test_notes_from_all_tracks(self):
        """Note-ons from every track are quantized."""
        midi_file = mido.MidiFile(type=1, ticks_per_beat=480)
        for note, start in ((60, 0), (67, 240)):
            track = mido.MidiTrack()
            track.append(mido.Message("note_on", note=note, velocity=100, time=start))
            track.append(mido.Message("note_off", note=note, velocity=0, time=60))
            midi_file.tracks.append(track)
        buffer = io.BytesIO()
        midi_file.save(file=buffer)

        steps = MidiReader().parse_bytes(buffer.getvalue()).steps

        assert steps[0].note == 60
        assert steps[2].note == 67

    def test_garbage_rejected(self):
        """Non-MIDI data raises ParseError."""
        with pytest.raises(ParseError):
            MidiReader().parse_bytes(b"not a midi file at all")

    def test_truncated_rejected(self, single_note_midi):
        """A truncated file raises ParseError."""
        with pytest.raises(ParseError):
            MidiReader().parse_bytes(single_note_midi[:10])

    def test_smpte_division_falls_back(self):
        """An SMPTE time division decodes at 480 ticks per quarter."""
        track = bytes([0x00, 0x90, 0x3C, 0x64, 0x60, 0x80, 0x3C, 0x00, 0x00, 0xFF, 0x2F, 0x00])
        reader = MidiReader()
        pattern = reader.parse_bytes(raw_midi(b"\xE7\x28", track))

        assert reader.ticks_per_quarter == 480
        assert pattern.steps[0].gate
        assert pattern.steps[0].note == 60
        assert not any(s.gate for s in pattern.steps[1:])

    def test_bad_key_signature_rejected(self):
        """A key signature mido cannot decode raises ParseError."""
        track = bytes([0x00, 0xFF, 0x59, 0x02, 0x0A, 0x00, 0x00, 0xFF, 0x2F, 0x00])

        with pytest.raises(ParseError):
            tribeconv.decode_midi(raw_midi(b"\x01\xE0", track))


class TestMidiWriter:
    """Test cases for MIDI rendering."""

    def test_header_events(self):
        """Tempo and 4/4 time signature come first."""
        pattern = Pattern(steps=[Step(60, gate=True)], tempo=150.0)
        midi_file = mido.MidiFile(file=io.BytesIO(MidiWriter().to_bytes(pattern)))

        assert midi_file.type == 0
        assert midi_file.ticks_per_beat == 480

        track = midi_file.tracks[0]
        assert track[0].type == "set_tempo"
        assert track[0].tempo == 400_000
        assert track[1].type == "time_signature"
        assert (track[1].numerator, track[1].denominator) == (4, 4)

    def test_note_lengths(self):
        """Plain notes last 3/4 of a step, slides 5/4."""
        steps = [Step(60, gate=True), Step(62, gate=True, slide=True), Step(64, gate=True)]
        spans = note_spans(MidiWriter().to_bytes(Pattern(steps=steps)))

        assert spans == [
            (0, 90, 60, 100),
            (120, 270, 62, 100),
            (240, 330, 64, 100),
        ]

    def test_tie_extends_note(self):
        """Tied steps lengthen the previous note instead of re-triggering."""
        steps = [
            Step(60, gate=True),
            Step(60, gate=True, tie=True),
            Step(60, gate=True, tie=True),
            Step(62, gate=True),
        ]
        spans = note_spans(MidiWriter().to_bytes(Pattern(steps=steps)))

        assert spans[0] == (0, 3 * 120 - 15, 60, 100)
        assert spans[1][0] == 360
        assert len(spans) == 2

    def test_accent_velocity(self):
        """Accent forces 127, unset velocity becomes 100."""
        steps = [Step(60, gate=True, velocity=0), Step(60, gate=True, accent=True, velocity=50)]
        spans = note_spans(MidiWriter().to_bytes(Pattern(steps=steps)))

        assert [s[3] for s in spans] == [100, 127]

    def test_padded_to_pattern_length(self):
        """Trailing rests still count towards the track length."""
        pattern = Pattern.create_empty(steps=16)
        pattern.steps[0] = Step(60, gate=True)
        midi_file = mido.MidiFile(file=io.BytesIO(MidiWriter().to_bytes(pattern)))

        total = sum(msg.time for msg in midi_file.tracks[0])
        assert total == 16 * 120

    def test_slide_into_retrigger(self):
        """A slide overlapping the same pitch keeps valid delta times."""
        steps = [Step(60, gate=True, slide=True), Step(60, gate=True)]
        events = MidiWriter().build_events(Pattern(steps=steps))

        ticks = [tick for tick, _, _ in events]
        assert ticks == sorted(ticks)

    def test_zero_tempo_defaults(self):
        """A non-positive tempo is written as 120 BPM."""
        pattern = Pattern(steps=[Step(60, gate=True)])
        pattern.tempo = 0
        midi_file = mido.MidiFile(file=io.BytesIO(MidiWriter().to_bytes(pattern)))

        assert midi_file.tracks[0][0].tempo == 500_000

    def test_nil_pattern(self):
        with pytest.raises(NilPatternError):
            MidiWriter().to_bytes(None)


class TestMidiRoundtrip:
    """Test cases for MIDI -> Pattern -> MIDI."""

    def test_notes_survive(self, bassline_midi):
        pattern = MidiReader().parse_bytes(bassline_midi)
        again = MidiReader().parse_bytes(MidiWriter().to_bytes(pattern))

        assert [s.note for s in again.steps if s.gate] == [60, 62, 64]
        assert again.tempo == pytest.approx(140.0, abs=0.01)
