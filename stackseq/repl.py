"""Interactive prompt that feeds typed lines to the interpreter.

Line editing and history come from :mod:`readline` where the platform
provides it (Linux and macOS). Elsewhere the prompt still works, without
history.

Press Ctrl+C to discard the current line. Press Ctrl+D to quit.
"""

import logging
import typing

import stackseq.interpreter
import stackseq.tokenizer

try:
	import readline
	HISTORY_SUPPORTED: bool = True
except ImportError:
	HISTORY_SUPPORTED = False


logger = logging.getLogger(__name__)


class Repl:

	"""Reads lines until end of input and executes each one.

	A line that fails is reported and skipped; the prompt keeps going.
	"""

	def __init__ (
		self,
		interpreter: stackseq.interpreter.Interpreter,
		prompt: str = "? ",
		history_length: int = 1024,
		read_line: typing.Callable[[str], str] = input
	) -> None:

		self.interpreter = interpreter
		self.prompt = prompt
		self.read_line = read_line

		if HISTORY_SUPPORTED:
			readline.set_history_length(history_length)

	def run (self) -> None:

		"""Run until end of input (Ctrl+D)."""

		while True:

			try:
				line = self.read_line(self.prompt)
			except KeyboardInterrupt:
				print()
				continue
			except EOFError:
				print()
				break

			self.run_line(line)

	def run_line (self, line: str) -> bool:

		"""Execute one line. Returns False if it failed."""

		try:
			self.interpreter.execute(line)

		except stackseq.tokenizer.NotationError as e:
			logger.error(f"{type(e).__name__}: {e}")
			return False

		return True
