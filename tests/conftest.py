import queue
import typing

import mido
import pytest

import stackseq.commands


class FakeMidiOut:

	"""MIDI output stub that records every message sent to it."""

	def __init__ (self) -> None:

		self.sent: typing.List[mido.Message] = []
		self.closed = False

	def send (self, message: mido.Message) -> None:

		"""Record the outgoing message."""

		self.sent.append(message)

	def close (self) -> None:

		self.closed = True


class FailingMidiOut (FakeMidiOut):

	"""MIDI output stub whose sends always fail, like a disconnected device."""

	def send (self, message: mido.Message) -> None:

		raise IOError("device disconnected")


# Module-level reference so tests can reach the port opened through patch_midi.
_current_fake_output: typing.Optional[FakeMidiOut] = None


def _fake_get_output_names () -> typing.List[str]:

	"""Return a fixed list of MIDI output names for tests."""

	return ["Dummy MIDI"]


def _fake_open_output (name: str) -> FakeMidiOut:

	"""Return a fake MIDI output regardless of the name."""

	global _current_fake_output
	_current_fake_output = FakeMidiOut()
	return _current_fake_output


@pytest.fixture
def patch_midi (monkeypatch: pytest.MonkeyPatch) -> None:

	"""Patch mido to use a fake MIDI output."""

	monkeypatch.setattr(mido, "get_output_names", _fake_get_output_names)
	monkeypatch.setattr(mido, "open_output", _fake_open_output)


@pytest.fixture
def midi_out () -> FakeMidiOut:

	return FakeMidiOut()


def drain (commands: "queue.Queue[stackseq.commands.Command]") -> typing.List[stackseq.commands.Command]:

	"""Take everything currently on a command queue."""

	items: typing.List[stackseq.commands.Command] = []

	while True:
		try:
			items.append(commands.get_nowait())
		except queue.Empty:
			break

	return items
