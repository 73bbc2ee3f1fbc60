import dataclasses
import typing

import stackseq.constants


@dataclasses.dataclass (frozen=True)
class Note:

	"""
	A pitch spec: an octave index relative to the neutral octave and a step within it.
	"""

	octave: int
	degree: int

	@property
	def pitch (self) -> typing.Tuple[int, int]:

		"""The ``(octave, degree)`` pair carried by note commands."""

		return (self.octave, self.degree)


@dataclasses.dataclass (frozen=True)
class Integer:

	"""A signed integer literal."""

	value: int


@dataclasses.dataclass (frozen=True)
class Word:

	"""A command word. Words are dispatched by the interpreter, never pushed."""

	text: str


@dataclasses.dataclass (frozen=True)
class Null:

	"""The ``_`` placeholder, an explicit absence of value."""


@dataclasses.dataclass (frozen=True)
class Text:

	"""A double-quoted string literal."""

	value: str


Token = typing.Union[Note, Integer, Word, Null, Text]


class NotationError (Exception):

	"""Base class for every error raised while reading or running notation."""

	pass


class LexError (NotationError):

	"""A literal could not be read. Aborts the whole input."""

	pass


_SEPARATORS = " \t\r\n,"


def _is_digit (char: str) -> bool:

	return "0" <= char <= "9"


def _is_letter (char: str) -> bool:

	return "a" <= char <= "z" or "A" <= char <= "Z"


def _octave_index (char: str) -> typing.Optional[int]:

	"""Return the octave offset for an octave letter, or None for any other character."""

	if char and char in stackseq.constants.OCTAVE_LETTERS:
		return ord(char) - ord(stackseq.constants.NEUTRAL_OCTAVE_LETTER)

	return None


def _read_digits (text: str, start: int) -> typing.Tuple[str, int]:

	"""Return the run of digits beginning at ``start`` and the index just past it."""

	end = start

	while end < len(text) and _is_digit(text[end]):
		end += 1

	return text[start:end], end


def _parse_integer (literal: str) -> int:

	value = int(literal)

	if not stackseq.constants.INTEGER_MIN <= value <= stackseq.constants.INTEGER_MAX:
		raise LexError(f"Integer literal {literal} is out of range")

	return value


def _parse_degree (literal: str) -> int:

	value = int(literal)

	if value > stackseq.constants.DEGREE_MAX:
		raise LexError(f"Note degree {literal} is out of range")

	return value


def tokenize (text: str) -> typing.List[Token]:

	"""
	Convert a line of notation into tokens.

	Scans greedily from left to right:

	- ``64``, ``-3``: integers. A ``-`` not followed by a digit is the word ``-``.
	- ``d0``, ``e7``, ``a12``: notes. The letter picks the octave (``d`` is the
	  neutral octave, ``a`` is three below, ``h`` four above) and the digits
	  pick the degree.
	- ``key``, ``bpm``: any other run of letters is a word.
	- ``_``: the null placeholder.
	- ``"song.txt"``: a string literal.
	- Spaces and commas separate tokens. Any other character is a
	  one-character word (``+``, ``.``).
	- ``--`` ends the line; nothing after it is read.

	Raises:
		LexError: A literal is out of range or a string is unterminated.

	Example:
		```python
		tokenize("1d0,64+")
		# [Integer(1), Note(0, 0), Integer(64), Word("+")]
		```
	"""

	tokens: typing.List[Token] = []
	pos = 0

	while pos < len(text):

		char = text[pos]
		following = text[pos + 1] if pos + 1 < len(text) else ""

		if _is_digit(char):
			digits, pos = _read_digits(text, pos)
			tokens.append(Integer(_parse_integer(digits)))

		elif char == "-":

			if following == "-":
				break

			if _is_digit(following):
				digits, pos = _read_digits(text, pos + 1)
				tokens.append(Integer(_parse_integer("-" + digits)))

			else:
				tokens.append(Word("-"))
				pos += 1

		elif _is_letter(char):

			octave = _octave_index(char)

			if octave is not None and _is_digit(following):
				digits, pos = _read_digits(text, pos + 1)
				tokens.append(Note(octave, _parse_degree(digits)))

			else:
				end = pos + 1
				while end < len(text) and _is_letter(text[end]):
					end += 1
				tokens.append(Word(text[pos:end]))
				pos = end

		elif char == "_":
			tokens.append(Null())
			pos += 1

		elif char == '"':
			closing = text.find('"', pos + 1)
			if closing == -1:
				raise LexError("Unterminated string literal")
			tokens.append(Text(text[pos + 1:closing]))
			pos = closing + 1

		elif char in _SEPARATORS:
			pos += 1

		else:
			tokens.append(Word(char))
			pos += 1

	return tokens
