"""Tests for the TD-3 .seq reader and writer."""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from tribeconv.errors import FormatError, NilPatternError
from tribeconv.formats.td3 import TD3, SeqLayout, SeqReader, SeqWriter, validate_seq
from tribeconv.models.pattern import Pattern, Step


class TestSeqReader:
    """Test cases for .seq decoding."""

    def test_canonical_notes(self, canonical_seq_data):
        """Test the canonical example decodes to C4 D4 E4 F4."""
        pattern = SeqReader().parse_bytes(canonical_seq_data)

        assert len(pattern.steps) == 16
        assert [s.note for s in pattern.steps[:4]] == [60, 62, 64, 65]
        assert all(s.gate for s in pattern.steps[:4])

    def test_canonical_flags(self, canonical_seq_data):
        """Test accent, slide and rest flags."""
        pattern = SeqReader().parse_bytes(canonical_seq_data)
        steps = pattern.steps

        assert steps[1].accent
        assert steps[1].velocity == 127
        assert steps[0].velocity == 100
        assert steps[2].slide
        assert not steps[0].slide
        assert not any(s.tie for s in steps)
        assert not any(s.gate for s in steps[4:])

    def test_pattern_fields(self, canonical_seq_data):
        """Test pattern level fields."""
        pattern = SeqReader().parse_bytes(canonical_seq_data)

        assert pattern.length == 16
        assert pattern.tempo == 120.0
        assert pattern.source_format == "seq"
        assert not pattern.triplet

    def test_too_short_rejected(self, canonical_seq_data):
        """Test that truncated data is rejected."""
        with pytest.raises(FormatError, match="too short"):
            SeqReader().parse_bytes(canonical_seq_data[:145])

    def test_bad_magic_rejected(self, canonical_seq_data):
        """Test that wrong magic bytes are rejected."""
        data = b"\x00\x00\x00\x00" + canonical_seq_data[4:]

        with pytest.raises(FormatError, match="magic"):
            SeqReader().parse_bytes(data)

    def test_format_error_is_value_error(self):
        """Callers catching ValueError still see format errors."""
        with pytest.raises(ValueError):
            SeqReader().parse_bytes(b"short")

    def test_sequence_length_clamped(self, canonical_seq_data):
        """Zero and oversized lengths fall back to 16."""
        data = bytearray(canonical_seq_data)
        data[SeqLayout.LENGTH : SeqLayout.LENGTH + 2] = b"\x00\x00"
        assert SeqReader().parse_bytes(bytes(data)).length == 16

        data[SeqLayout.LENGTH : SeqLayout.LENGTH + 2] = b"\x01\x01"
        assert SeqReader().parse_bytes(bytes(data)).length == 16

        data[SeqLayout.LENGTH : SeqLayout.LENGTH + 2] = b"\x00\x08"
        pattern = SeqReader().parse_bytes(bytes(data))
        assert pattern.length == 8
        assert len(pattern.steps) == 8

    def test_tie_bit_zero_means_sustain(self, canonical_seq_data):
        """A cleared tie bit marks the step as tied, except on step 0."""
        data = bytearray(canonical_seq_data)
        # Clear bits 0 and 3: sustain on steps 0 and 3
        data[SeqLayout.TIE : SeqLayout.TIE + 4] = bytes([0x0F, 0x06, 0x0F, 0x0F])

        steps = SeqReader().parse_bytes(bytes(data)).steps

        assert not steps[0].tie
        assert steps[3].tie
        assert not steps[1].tie

    def test_note_clamped(self, canonical_seq_data):
        """Notes above 127 after the octave shift are clamped."""
        data = bytearray(canonical_seq_data)
        data[SeqLayout.NOTES : SeqLayout.NOTES + 2] = b"\x0F\x0F"

        assert SeqReader().parse_bytes(bytes(data)).steps[0].note == 127

    def test_read_header(self, canonical_seq_data):
        """Test decoding the descriptive header blocks."""
        header = SeqReader.read_header(canonical_seq_data)

        assert header.device_name == "TD-3"
        assert header.version == "1.3.7"
        assert header.fill_length == 0x70
        assert header.sequence_length == 16

    def test_read_file(self, tmp_path, canonical_seq_data):
        """Test reading from disk."""
        path = tmp_path / "pattern.seq"
        path.write_bytes(canonical_seq_data)

        assert SeqReader.can_read(path)
        assert SeqReader.read(path).steps[2].note == 64


class TestSeqWriter:
    """Test cases for .seq encoding."""

    def test_always_146_bytes(self):
        """Output size does not depend on step count."""
        writer = SeqWriter()

        assert len(writer.to_bytes(Pattern())) == 146
        assert len(writer.to_bytes(Pattern.create_empty(steps=3))) == 146
        assert len(writer.to_bytes(Pattern(steps=[Step(60, gate=True)] * 20))) == 146

    def test_reproduces_canonical_dump(self, canonical_seq_data):
        """Encoding the decoded canonical pattern gives back the same bytes."""
        pattern = SeqReader().parse_bytes(canonical_seq_data)

        assert SeqWriter().to_bytes(pattern) == canonical_seq_data

    def test_header_bytes(self):
        """Test the header blocks written by the editor software."""
        data = SeqWriter().to_bytes(Pattern())

        assert data[0:4] == b"\x23\x98\x54\x76"
        assert data[4:8] == b"\x00\x00\x00\x08"
        assert data[8:16] == "TD-3".encode("utf-16-be")
        assert data[16:20] == b"\x00\x00\x00\x0a"
        assert data[0x20:0x24] == b"\x00\x70\x00\x00"

    def test_note_encoding(self):
        """Notes are shifted down two octaves and split into nibbles."""
        pattern = Pattern(steps=[Step(60, gate=True), Step(10, gate=True)])
        data = SeqWriter().to_bytes(pattern)

        assert data[SeqLayout.NOTES : SeqLayout.NOTES + 2] == b"\x02\x04"
        # Below the device range
        assert data[SeqLayout.NOTES + 2 : SeqLayout.NOTES + 4] == b"\x00\x00"

    def test_length_field(self):
        """Sequence length is min(step count, 16) as a nibble pair."""
        data = SeqWriter().to_bytes(Pattern.create_empty(steps=5))
        assert data[SeqLayout.LENGTH : SeqLayout.LENGTH + 2] == b"\x00\x05"

        data = SeqWriter().to_bytes(Pattern(steps=[Step()] * 16))
        assert data[SeqLayout.LENGTH : SeqLayout.LENGTH + 2] == b"\x01\x00"

    def test_rest_and_tie_masks(self):
        """Rest bits set for rests, tie bits set for new notes."""
        steps = [Step(60, gate=True), Step(60, gate=True, tie=True)] + [Step()] * 14
        data = SeqWriter().to_bytes(Pattern(steps=steps))

        # rest mask 0xFFFC, tie mask 0xFFFD
        assert data[SeqLayout.REST : SeqLayout.REST + 4] == bytes([0x0F, 0x0C, 0x0F, 0x0F])
        assert data[SeqLayout.TIE : SeqLayout.TIE + 4] == bytes([0x0F, 0x0D, 0x0F, 0x0F])

    def test_first_step_tie_ignored(self):
        """A tie on step 0 is written as a new note."""
        data = SeqWriter().to_bytes(Pattern(steps=[Step(60, gate=True, tie=True)]))

        assert data[SeqLayout.TIE : SeqLayout.TIE + 4] == bytes([0x0F] * 4)

    def test_triplet_flag(self):
        """The triplet flag is carried through."""
        data = SeqWriter().to_bytes(Pattern(triplet=True))

        assert data[SeqLayout.TRIPLET + 1] == 0x01
        assert SeqReader().parse_bytes(data).triplet

    def test_nil_pattern(self):
        """Test that encoding None fails."""
        with pytest.raises(NilPatternError):
            SeqWriter().to_bytes(None)

    def test_write_file(self, tmp_path):
        """Test writing to disk, creating directories."""
        path = tmp_path / "out" / "pattern.seq"
        SeqWriter.write(Pattern.create_empty("EMPTY"), path)

        assert path.stat().st_size == 146


class TestSeqRoundtrip:
    """Test cases for decode(encode(p))."""

    def test_flags_preserved(self):
        """Note, gate, accent, slide and tie survive a round trip."""
        steps = [
            Step(36, gate=True),
            Step(48, gate=True, accent=True),
            Step(48, gate=True, tie=True),
            Step(50, gate=True, slide=True),
            Step(52, gate=False),
            Step(127, gate=True, accent=True, slide=True),
        ]
        pattern = Pattern(steps=steps, length=len(steps))

        decoded = SeqReader().parse_bytes(SeqWriter().to_bytes(pattern))

        for original, result in zip(steps, decoded.steps):
            assert result.note == original.note
            assert result.gate == original.gate
            assert result.accent == original.accent
            assert result.slide == original.slide
            assert result.tie == original.tie

    def test_idempotent(self, canonical_seq_data):
        """Encoding a decoded pattern and decoding again is stable."""
        td3 = TD3()
        first = td3.parse_seq(canonical_seq_data)
        second = td3.parse_seq(td3.generate_seq(first))

        assert second.steps == first.steps
        assert second.length == first.length


class TestValidateSeq:
    """Test cases for non-raising .seq validation."""

    def test_clean_file(self, canonical_seq_data):
        """The canonical dump has no issues."""
        assert validate_seq(canonical_seq_data) == []

    def test_short_file(self):
        """A short file yields a single error."""
        issues = validate_seq(bytes(10))

        assert len(issues) == 1
        assert issues[0].severity == "error"

    def test_collects_several_issues(self, canonical_seq_data):
        """Bad magic and a damaged nibble are both reported."""
        data = bytearray(canonical_seq_data)
        data[0] = 0x00
        data[SeqLayout.NOTES] = 0x20

        areas = {issue.area for issue in validate_seq(bytes(data))}

        assert "MAGIC" in areas
        assert "NOTES" in areas
