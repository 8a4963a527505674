"""
Pattern data model - the canonical 16-step monophonic sequence.

Every decoder produces a Pattern and every encoder consumes one. A Pattern
is a transient value passed from one codec to another; it carries no
device-specific state.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from tribeconv.utils.validation import clamp_midi_value

MAX_STEPS = 16
DEFAULT_TEMPO = 120.0
DEFAULT_VELOCITY = 100
ACCENT_VELOCITY = 127

NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]


def note_name(note: int) -> str:
    """Return a note name such as 'C4' for a MIDI note number (60 = C4)."""
    return f"{NOTE_NAMES[note % 12]}{note // 12 - 1}"


@dataclass
class Step:
    """
    A single step of a pattern.

    Attributes:
        note: MIDI note number (0-127)
        gate: Whether the step sounds (False = rest)
        accent: Emphasis flag, forces velocity 127 on output
        slide: Glide into the following step
        tie: Sustain the previous step's pitch instead of re-triggering
            (ignored on the first step)
        velocity: MIDI velocity (0-127)
    """

    note: int = 0
    gate: bool = False
    accent: bool = False
    slide: bool = False
    tie: bool = False
    velocity: int = 0

    @property
    def effective_velocity(self) -> int:
        """Velocity to emit: 127 on accent, 100 when unset."""
        if self.accent:
            return ACCENT_VELOCITY
        if self.velocity == 0:
            return DEFAULT_VELOCITY
        return clamp_midi_value(self.velocity)


@dataclass
class Pattern:
    """
    A sequence of up to 16 steps.

    Attributes:
        name: Display label (no effect on encoding)
        steps: Ordered steps, at most 16
        length: Number of active steps (1-16)
        tempo: Tempo in BPM, 120.0 when unset or not positive
        device_id: Target hardware family, informational only
        triplet: Structural triplet flag from the binary pattern, not interpreted
        source_format: Format the pattern was decoded from ("seq", "syx", "midi")
    """

    name: str = ""
    steps: List[Step] = field(default_factory=list)
    length: int = MAX_STEPS
    tempo: float = DEFAULT_TEMPO
    device_id: int = 0
    triplet: bool = False
    source_format: Optional[str] = None

    def __post_init__(self):
        if not self.tempo or self.tempo <= 0:
            self.tempo = DEFAULT_TEMPO

    @property
    def step_count(self) -> int:
        return len(self.steps)

    @property
    def active_steps(self) -> List[Step]:
        """Steps that produce sound."""
        return [s for s in self.steps if s.gate]

    def validate(self) -> List[str]:
        """
        Validate pattern data.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if len(self.steps) > MAX_STEPS:
            errors.append(f"Too many steps: {len(self.steps)} (max {MAX_STEPS})")

        if not 1 <= self.length <= MAX_STEPS:
            errors.append(f"Invalid length: {self.length} (must be 1-{MAX_STEPS})")

        if self.tempo <= 0:
            errors.append(f"Invalid tempo: {self.tempo}")

        for i, step in enumerate(self.steps):
            if not 0 <= step.note <= 127:
                errors.append(f"Step {i + 1}: note {step.note} out of range")
            if not 0 <= step.velocity <= 127:
                errors.append(f"Step {i + 1}: velocity {step.velocity} out of range")

        return errors

    @classmethod
    def create_empty(cls, name: str = "", steps: int = MAX_STEPS) -> "Pattern":
        """
        Create a pattern of rests.

        Args:
            name: Pattern name
            steps: Number of steps (clamped to 1-16)

        Returns:
            New Pattern instance
        """
        count = max(1, min(MAX_STEPS, steps))
        return cls(name=name, steps=[Step() for _ in range(count)], length=count)

    def __repr__(self) -> str:
        return (
            f"Pattern(name={self.name!r}, tempo={self.tempo}, "
            f"steps={len(self.active_steps)}/{len(self.steps)})"
        )
