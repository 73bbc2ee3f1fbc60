"""Scheduling commands sent from the interpreter to the playback backend.

Commands are immutable values. Once put on the backend's queue they belong
to the backend thread.
"""

import dataclasses
import typing


Pitch = typing.Tuple[int, int]


@dataclasses.dataclass (frozen=True)
class NoteOn:

	"""Start a note. ``pitch`` is the ``(octave, degree)`` pitch spec."""

	channel: int
	pitch: Pitch
	velocity: int


@dataclasses.dataclass (frozen=True)
class NoteOff:

	"""Release a note started with the same channel and pitch spec."""

	channel: int
	pitch: Pitch


@dataclasses.dataclass (frozen=True)
class SetTuning:

	"""Set the number of steps in one pitch period (equal divisions of the octave)."""

	steps: int


@dataclasses.dataclass (frozen=True)
class SetKeyOffset:

	offset: int


@dataclasses.dataclass (frozen=True)
class SetTempo:

	bpm: int


@dataclasses.dataclass (frozen=True)
class SetLinesPerBeat:

	lines: int


@dataclasses.dataclass (frozen=True)
class Wait:

	"""Hold back everything queued after this command for ``ticks`` lines."""

	ticks: int


@dataclasses.dataclass (frozen=True)
class Stop:

	"""Release every sounding note."""


Command = typing.Union[NoteOn, NoteOff, SetTuning, SetKeyOffset, SetTempo, SetLinesPerBeat, Wait, Stop]
