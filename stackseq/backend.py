"""Playback backend: the thread that turns commands into MIDI.

The backend owns all playback state (tuning, key, tempo, lines per beat and
the notes currently sounding) and is the only code that touches it. The
interpreter reaches it solely through :attr:`Backend.commands`, an unbounded
:class:`queue.Queue`, and never waits for an answer.

Each cycle the backend drains every queued command and applies them in
order. A :class:`~stackseq.commands.Wait` sleeps for its ticks and then
takes at most one further command off the queue before the batch carries
on. When the queue is empty the thread idles for a few milliseconds.

MIDI output is best-effort: a failed send is logged and playback continues.
"""

import logging
import queue
import threading
import time
import typing

import mido

import stackseq.commands
import stackseq.config
import stackseq.constants


logger = logging.getLogger(__name__)


ActiveNote = typing.Tuple[int, stackseq.commands.Pitch]


class Backend:

	"""Single consumer of the command queue, running in a daemon thread.

	Example::

		backend = Backend(midi_out)
		backend.start()

		backend.commands.put(stackseq.commands.NoteOn(0, (0, 0), 100))
		backend.commands.put(stackseq.commands.Wait(4))
		backend.commands.put(stackseq.commands.NoteOff(0, (0, 0)))

		backend.shutdown()

	The loop can also be stepped without a thread by calling :meth:`poll`,
	which is how the tests drive it.
	"""

	def __init__ (
		self,
		midi_out: typing.Any,
		config: typing.Optional[stackseq.config.BackendConfig] = None,
		commands: typing.Optional["queue.Queue[stackseq.commands.Command]"] = None,
		sleep: typing.Callable[[float], None] = time.sleep
	) -> None:

		"""Create a stopped backend.

		Parameters:
			midi_out: Output port with ``send(message)`` and ``close()``, usually
				a ``mido`` port. ``None`` discards all output.
			config: Initial tuning, key, tempo, lines per beat and idle interval.
			commands: Queue to consume. A new unbounded queue is created when omitted.
			sleep: Function used for every suspension, in seconds.
		"""

		if config is None:
			config = stackseq.config.BackendConfig()

		self.midi_out = midi_out
		self.commands: "queue.Queue[stackseq.commands.Command]" = commands if commands is not None else queue.Queue()

		self.tuning: int = config.tuning
		self.key: int = config.key
		self.bpm: int = config.bpm
		self.lines_per_beat: int = config.lines_per_beat
		self.idle_interval: float = config.idle_interval

		self.active_notes: typing.List[ActiveNote] = []

		self._sleep = sleep
		self._thread: typing.Optional[threading.Thread] = None
		self._running: bool = False

	@property
	def seconds_per_tick (self) -> float:

		"""Length of one wait tick at the current tempo."""

		return 60.0 / (self.bpm * self.lines_per_beat)

	def start (self) -> None:

		"""Start the playback thread. A second call while running is a no-op."""

		if self._running:
			return

		self._running = True
		self._thread = threading.Thread(
			target = self._run,
			name   = "stackseq-backend",
			daemon = True,
		)
		self._thread.start()

		logger.info("Backend started")

	def shutdown (self, timeout: float = 2.0) -> None:

		"""Stop the playback thread, release sounding notes and close the port.

		This tears the backend down. To silence notes and keep playing, send a
		:class:`~stackseq.commands.Stop` command instead.
		"""

		if self._thread is not None:
			self._running = False
			self._thread.join(timeout)

			if self._thread.is_alive():
				logger.warning(f"Backend thread did not stop within {timeout:.1f} s")
				return

			self._thread = None

		else:
			self._release_all()

		if self.midi_out is not None:
			self.midi_out.close()
			self.midi_out = None

		logger.info("Backend stopped")

	def _run (self) -> None:

		"""Thread target. Polls until :meth:`shutdown` clears ``_running``.

		The idle sleep follows an empty poll only, so a busy queue is drained
		again straight away.
		"""

		try:
			while self._running:
				if not self.poll():
					self._sleep(self.idle_interval)

		finally:
			self._release_all()

	def poll (self) -> bool:

		"""Run one drain cycle.

		Returns:
			True if any command was taken off the queue.
		"""

		batch = self._drain()

		for command in batch:

			if not isinstance(command, stackseq.commands.Wait):
				self.apply(command)
				continue

			self._wait(command.ticks)

			# Only the next single command is picked up after a wait; the rest
			# of the queue waits for the next drain. A Wait taken here is dropped.
			try:
				following = self.commands.get_nowait()
			except queue.Empty:
				continue

			if isinstance(following, stackseq.commands.Stop):
				self._release_all()
				break

			if isinstance(following, stackseq.commands.Wait):
				continue

			self.apply(following)

		return bool(batch)

	def _drain (self) -> typing.List[stackseq.commands.Command]:

		batch: typing.List[stackseq.commands.Command] = []

		while True:
			try:
				batch.append(self.commands.get_nowait())
			except queue.Empty:
				break

		return batch

	def apply (self, command: stackseq.commands.Command) -> None:

		"""Apply a single command to the backend state and the MIDI output.

		:class:`~stackseq.commands.Wait` is paced by :meth:`poll` and is a no-op here.
		"""

		if isinstance(command, stackseq.commands.NoteOn):
			self._note_on(command.channel, command.pitch, command.velocity)

		elif isinstance(command, stackseq.commands.NoteOff):
			self._note_off(command.channel, command.pitch)

		elif isinstance(command, stackseq.commands.SetTuning):
			self.tuning = command.steps
			logger.debug(f"Tuning set to {self.tuning} steps per period")

		elif isinstance(command, stackseq.commands.SetKeyOffset):
			self.key = command.offset
			logger.debug(f"Key offset set to {self.key}")

		elif isinstance(command, stackseq.commands.SetTempo):
			self.bpm = command.bpm
			logger.debug(f"BPM set to {self.bpm}")

		elif isinstance(command, stackseq.commands.SetLinesPerBeat):
			self.lines_per_beat = command.lines
			logger.debug(f"Lines per beat set to {self.lines_per_beat}")

		elif isinstance(command, stackseq.commands.Stop):
			self._release_all()

	def _wait (self, ticks: int) -> None:

		if ticks > 0:
			self._sleep(ticks * self.seconds_per_tick)

	def resolve (self, pitch: stackseq.commands.Pitch) -> typing.Optional[int]:

		"""Map a pitch spec to a MIDI note number, or None when it falls outside 0-127."""

		octave, degree = pitch
		note = stackseq.constants.MIDDLE_C + self.key + self.tuning * octave + degree

		if stackseq.constants.MIN_NOTE <= note <= stackseq.constants.MAX_NOTE:
			return note

		return None

	def _note_on (self, channel: int, pitch: stackseq.commands.Pitch, velocity: int) -> None:

		note = self.resolve(pitch)

		if note is None:
			logger.debug(f"Dropped note-on for {pitch}: outside MIDI range")
			return

		velocity = max(stackseq.constants.MIN_VELOCITY, min(stackseq.constants.MAX_VELOCITY, velocity))

		self._send('note_on', channel, note, velocity)
		self.active_notes.append((channel, pitch))

	def _note_off (self, channel: int, pitch: stackseq.commands.Pitch) -> None:

		note = self.resolve(pitch)

		if note is None:
			logger.debug(f"Dropped note-off for {pitch}: outside MIDI range")
			return

		self._send('note_off', channel, note, stackseq.constants.RELEASE_VELOCITY)
		self.active_notes = [active for active in self.active_notes if active != (channel, pitch)]

	def _release_all (self) -> None:

		"""Send a note-off for every tracked note and forget them all.

		Notes are tracked by pitch spec, so each release is mapped with the
		key and tuning in force now, not those the note started under.
		"""

		for channel, pitch in self.active_notes:
			note = self.resolve(pitch)
			if note is not None:
				self._send('note_off', channel, note, stackseq.constants.RELEASE_VELOCITY)

		self.active_notes = []

	def _send (self, message_type: str, channel: int, note: int, velocity: int) -> None:

		"""
		Send a note message to the output port. Failures are logged and ignored.
		"""

		if self.midi_out is None:
			return

		try:
			self.midi_out.send(mido.Message(message_type, channel=channel, note=note, velocity=velocity))

		except Exception:
			logger.exception("MIDI send failed (device may be disconnected)")
