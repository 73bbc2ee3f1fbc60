"""Stack machine that turns notation into backend commands.

Values (integers, notes, ``_``, strings) are pushed onto an operand stack
until a command word consumes them::

	1 d0 64 +      -- channel 1, neutral-octave degree 0, velocity 64: note on
	1 d0 -         -- release it
	140 bpm 8 w    -- set the tempo, then wait eight lines

When a word cannot find the operands it needs the rest of the line is
skipped. Commands already sent for that line stay sent.

The interpreter can also hold a script file. ``p`` plays a range of its
lines, sending a one-tick wait after each line and then releasing any notes
started with ``.`` on that line.
"""

import logging
import queue
import typing

import stackseq.commands
import stackseq.constants
import stackseq.tokenizer


logger = logging.getLogger(__name__)


class InterpretError (stackseq.tokenizer.NotationError):

	"""A line could not be executed. The rest of the line is skipped."""

	pass


class StackUnderflow (InterpretError):

	"""A command word needed an operand but the stack was empty."""

	pass


class StackTypeError (InterpretError):

	"""A command word popped an operand of the wrong kind."""

	pass


class OperandRangeError (InterpretError):

	"""An operand was of the right kind but outside the values the command accepts."""

	pass


class ScriptFileError (InterpretError):

	"""The script file is not set, missing or unreadable."""

	pass


class LineRangeError (InterpretError):

	"""A ``p`` range does not fit inside the loaded script."""

	pass


_T = typing.TypeVar("_T")


class Interpreter:

	"""
	Executes notation lines and sends the resulting commands to the backend.

	Parameters:
		commands: The backend's command queue.
		path: Optional script file to associate. It is not read until
			:meth:`load_file`, :meth:`reload` or a ``p``/``r`` word.

	Example:
		```python
		backend = stackseq.backend.Backend(midi_out)
		backend.start()

		interpreter = Interpreter(backend.commands)
		interpreter.load_file("song.txt")
		interpreter.execute("1 _ p")
		```
	"""

	def __init__ (self, commands: "queue.Queue[stackseq.commands.Command]", path: typing.Optional[str] = None) -> None:

		self.commands = commands
		self.stack: typing.List[stackseq.tokenizer.Token] = []
		self.postponed: typing.List[stackseq.commands.NoteOff] = []
		self.path = path
		self.lines: typing.List[str] = []
		self._playing: bool = False

		self._words: typing.Dict[str, typing.Callable[[], None]] = {
			"+": self._note_on,
			".": self._staccato,
			"-": self._note_off,
			"key": self._key,
			"edo": self._edo,
			"bpm": self._bpm,
			"lps": self._lps,
			"w": self._wait,
			"s": self._stop,
			"r": self.reload,
			"p": self._play,
			"load": self._load,
		}

	def execute (self, line: str) -> None:

		"""
		Tokenize and run one line.

		Raises:
			LexError: The line could not be tokenized. Nothing on it runs.
			InterpretError: A command failed. Tokens after it are not processed.
		"""

		for token in stackseq.tokenizer.tokenize(line):

			if isinstance(token, stackseq.tokenizer.Word):
				self._dispatch(token.text)
			else:
				self.stack.append(token)

	def _dispatch (self, word: str) -> None:

		handler = self._words.get(word)

		if handler is None:
			logger.debug(f"Ignoring unknown word {word!r}")
			return

		handler()

	def send (self, command: stackseq.commands.Command) -> None:

		self.commands.put(command)

	# -- Operand reads ------------------------------------------------------

	def _pop (self, kind: typing.Type[_T], description: str) -> _T:

		if not self.stack:
			raise StackUnderflow(f"Expected {description} but the stack is empty")

		token = self.stack.pop()

		if not isinstance(token, kind):
			raise StackTypeError(f"Expected {description}, found {token!r}")

		return token

	def read_integer (self) -> int:

		return self._pop(stackseq.tokenizer.Integer, "an integer").value

	def read_note (self) -> stackseq.commands.Pitch:

		return self._pop(stackseq.tokenizer.Note, "a note").pitch

	def read_text (self) -> str:

		return self._pop(stackseq.tokenizer.Text, "a string").value

	def read_option_integer (self) -> typing.Optional[int]:

		"""Pop an integer or ``_``. Returns None for ``_``."""

		if not self.stack:
			raise StackUnderflow("Expected an integer or _ but the stack is empty")

		token = self.stack.pop()

		if isinstance(token, stackseq.tokenizer.Null):
			return None

		if isinstance(token, stackseq.tokenizer.Integer):
			return token.value

		raise StackTypeError(f"Expected an integer or _, found {token!r}")

	def _read_positive (self, name: str) -> int:

		value = self.read_integer()

		if value <= 0:
			raise OperandRangeError(f"{name} must be positive, got {value}")

		return value

	# -- Words --------------------------------------------------------------

	def _read_note_on (self) -> stackseq.commands.NoteOn:

		velocity = self.read_option_integer()
		pitch = self.read_note()
		channel = self.read_integer()

		if velocity is None:
			velocity = stackseq.constants.DEFAULT_VELOCITY

		return stackseq.commands.NoteOn(channel, pitch, velocity)

	def _note_on (self) -> None:

		self.send(self._read_note_on())

	def _staccato (self) -> None:

		note_on = self._read_note_on()

		self.send(note_on)
		self.postponed.append(stackseq.commands.NoteOff(note_on.channel, note_on.pitch))

	def _note_off (self) -> None:

		pitch = self.read_note()
		channel = self.read_integer()

		self.send(stackseq.commands.NoteOff(channel, pitch))

	def _key (self) -> None:

		self.send(stackseq.commands.SetKeyOffset(self.read_integer()))

	def _edo (self) -> None:

		self.send(stackseq.commands.SetTuning(self._read_positive("edo")))

	def _bpm (self) -> None:

		self.send(stackseq.commands.SetTempo(self._read_positive("bpm")))

	def _lps (self) -> None:

		self.send(stackseq.commands.SetLinesPerBeat(self._read_positive("lps")))

	def _wait (self) -> None:

		ticks = self.read_integer()

		if ticks < 0:
			raise OperandRangeError(f"w needs a tick count of zero or more, got {ticks}")

		self.send(stackseq.commands.Wait(ticks))

	def _stop (self) -> None:

		self.send(stackseq.commands.Stop())

	def _load (self) -> None:

		self.load_file(self.read_text())

	def _play (self) -> None:

		end = self.read_option_integer()
		start = self.read_integer()

		self.play(start, end)

	# -- Script files -------------------------------------------------------

	def load_file (self, path: str) -> None:

		"""Associate ``path`` with this interpreter and read its lines."""

		self.path = path
		self.reload()

	def reload (self) -> None:

		"""Re-read the associated script file into the line buffer."""

		if self.path is None:
			raise ScriptFileError("No script file loaded")

		try:
			with open(self.path, 'r', encoding='utf-8') as f:
				self.lines = f.read().splitlines()

		except OSError as e:
			raise ScriptFileError(f"Cannot read {self.path}: {e}") from e

		logger.info(f"Loaded {len(self.lines)} lines from {self.path}")

	def play (self, start: int, end: typing.Optional[int] = None) -> None:

		"""
		Reload the script and play lines ``start`` to ``end``, counting from 1.

		Each line is executed, then followed by a one-tick wait and the
		release of every note started on it with ``.``. ``end`` is inclusive;
		None plays to the end of the file.

		Raises:
			ScriptFileError: The script cannot be read.
			LineRangeError: The range does not fit the script. Nothing is played.
			InterpretError: A line failed. Its postponed releases are still
				sent and the remaining lines are skipped.
		"""

		if self._playing:
			raise InterpretError("p cannot be used inside a script that is being played")

		self.reload()

		if end is None:
			end = len(self.lines)

		if start < 1 or end < start - 1 or end > len(self.lines):
			raise LineRangeError(f"Lines {start}-{end} are outside the script ({len(self.lines)} lines)")

		self._playing = True

		try:
			for line in self.lines[start - 1:end]:

				try:
					self.execute(line)
					self.send(stackseq.commands.Wait(1))

				finally:
					self.flush_postponed()

		finally:
			self._playing = False

	def autoplay (self) -> None:

		"""Play the loaded script from its first line up to the first blank line."""

		end = len(self.lines)

		for index, line in enumerate(self.lines):
			if not line.strip():
				end = index
				break

		if end > 0:
			self.play(1, end)

	def flush_postponed (self) -> None:

		"""Send every postponed release and clear the list."""

		for note_off in self.postponed:
			self.send(note_off)

		self.postponed = []
