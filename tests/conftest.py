"""Test configuration and fixtures."""

import io
import sys
from pathlib import Path

import mido
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from tribeconv.utils.checksum import calculate_xor_checksum

# Steps 0-3 = C4 D4 E4 F4, step 1 accented, step 2 slides, steps 4-15 rest
CANONICAL_SEQ_HEX = (
    "23 98 54 76"  # magic
    " 00 00 00 08 00 54 00 44 00 2D 00 33"  # "TD-3"
    " 00 00 00 0A 00 31 00 2E 00 33 00 2E 00 37 00 00"  # "1.3.7"
    " 00 70 00 00"  # fill
    " 02 04 02 06 02 08 02 09" + " 00 00" * 12  # notes
    + " 00 00 00 01" + " 00 00" * 14  # accents
    + " 00 00 00 00 00 01" + " 00 00" * 13  # slides
    + " 00 00"  # triplet
    " 01 00"  # length 16
    " 00 00"  # reserved
    " 0F 0F 0F 0F"  # tie mask 0xFFFF, all new notes
    " 0F 00 0F 0F"  # rest mask 0xFFF0
)

CANONICAL_PAYLOAD = bytes([0x24, 0x01, 0x26, 0x03, 0x28, 0x05, 0x29, 0x01]) + bytes(24)


@pytest.fixture
def canonical_seq_data():
    """The canonical 146-byte .seq dump."""
    return bytes.fromhex(CANONICAL_SEQ_HEX)


@pytest.fixture
def canonical_syx_data():
    """Device-style SysEx dump of the canonical pattern, payload at offset 8."""
    return (
        bytes([0xF0, 0x00, 0x20, 0x32, 0x00, 0x01, 0x40, 0x00])
        + CANONICAL_PAYLOAD
        + bytes([calculate_xor_checksum(CANONICAL_PAYLOAD), 0xF7])
    )


def build_midi(notes, ticks_per_beat=480, tempo_bpm=None):
    """
    Build MIDI file bytes with mido.

    Args:
        notes: (start_tick, end_tick, note, velocity) tuples
        ticks_per_beat: File resolution
        tempo_bpm: Optional tempo event at tick 0
    """
    events = []
    for start, end, note, velocity in notes:
        events.append((start, 1, mido.Message("note_on", note=note, velocity=velocity)))
        events.append((end, 0, mido.Message("note_off", note=note, velocity=0)))
    events.sort(key=lambda e: (e[0], e[1]))

    midi_file = mido.MidiFile(type=0, ticks_per_beat=ticks_per_beat)
    track = mido.MidiTrack()
    midi_file.tracks.append(track)

    if tempo_bpm is not None:
        track.append(mido.MetaMessage("set_tempo", tempo=mido.bpm2tempo(tempo_bpm), time=0))

    last = 0
    for tick, _, msg in events:
        track.append(msg.copy(time=tick - last))
        last = tick

    buffer = io.BytesIO()
    midi_file.save(file=buffer)
    return buffer.getvalue()


@pytest.fixture
def single_note_midi():
    """One C4 on step 0, one step long, at 480 ticks per quarter."""
    return build_midi([(0, 120, 60, 100)])


@pytest.fixture
def bassline_midi():
    """Four sixteenths: C4, D4 (accent), E4, E4 at 140 BPM."""
    return build_midi(
        [
            (0, 90, 60, 100),
            (120, 210, 62, 127),
            (240, 330, 64, 100),
            (360, 450, 64, 100),
        ],
        tempo_bpm=140,
    )
