import pytest

import stackseq.tokenizer
from stackseq.tokenizer import Integer, Note, Null, Text, Word


def test_basic_tokenize ():

	"""Test a line with note-ons and a note-off."""

	tokens = stackseq.tokenizer.tokenize("1d0,64+ 2d7,64+ 1d0-")

	assert tokens == [
		Integer(1), Note(0, 0), Integer(64), Word("+"),
		Integer(2), Note(0, 7), Integer(64), Word("+"),
		Integer(1), Note(0, 0), Word("-"),
	]


def test_empty_string ():

	assert stackseq.tokenizer.tokenize("") == []
	assert stackseq.tokenizer.tokenize("  , \t") == []


def test_negative_integer ():

	assert stackseq.tokenizer.tokenize("-3 key") == [Integer(-3), Word("key")]


def test_lone_minus_is_a_word ():

	assert stackseq.tokenizer.tokenize("1 d0 - 2") == [Integer(1), Note(0, 0), Word("-"), Integer(2)]


def test_minus_at_end_of_line ():

	assert stackseq.tokenizer.tokenize("1d0-") == [Integer(1), Note(0, 0), Word("-")]


@pytest.mark.parametrize("line", [
	"1d0,64+ -- play middle C",
	"1d0,64+--1d0-",
	"1d0,64+ -- 99 \"unterminated",
])
def test_comment_truncates_line (line: str):

	"""Nothing after -- is tokenized, even text that would not lex."""

	assert stackseq.tokenizer.tokenize(line) == [Integer(1), Note(0, 0), Integer(64), Word("+")]


def test_comment_at_start ():

	assert stackseq.tokenizer.tokenize("-- 1d0,64+") == []


def test_octave_letters ():

	"""Octave letters run from a (three below) to h (four above), centred on d."""

	tokens = stackseq.tokenizer.tokenize("a0 b1 c2 d3 e4 f5 g6 h7")

	assert tokens == [
		Note(-3, 0), Note(-2, 1), Note(-1, 2), Note(0, 3),
		Note(1, 4), Note(2, 5), Note(3, 6), Note(4, 7),
	]


def test_multi_digit_degree ():

	assert stackseq.tokenizer.tokenize("e12") == [Note(1, 12)]


def test_words ():

	tokens = stackseq.tokenizer.tokenize("31 edo 140 bpm 4 lps 2 key")

	assert tokens == [
		Integer(31), Word("edo"), Integer(140), Word("bpm"),
		Integer(4), Word("lps"), Integer(2), Word("key"),
	]


def test_octave_letter_without_digit_starts_a_word ():

	"""A letter from the octave band only forms a note when a digit follows."""

	assert stackseq.tokenizer.tokenize("da1") == [Word("da"), Integer(1)]
	assert stackseq.tokenizer.tokenize("d") == [Word("d")]


def test_word_stops_at_digit ():

	assert stackseq.tokenizer.tokenize("key5") == [Word("key"), Integer(5)]


def test_uppercase_letters_are_words ():

	assert stackseq.tokenizer.tokenize("D0") == [Word("D"), Integer(0)]


def test_null ():

	"""_ is Null, never Integer(0)."""

	tokens = stackseq.tokenizer.tokenize("1 d0 _ +")

	assert tokens == [Integer(1), Note(0, 0), Null(), Word("+")]
	assert tokens[2] != Integer(0)


def test_single_character_words ():

	assert stackseq.tokenizer.tokenize("1d0,64. s!") == [
		Integer(1), Note(0, 0), Integer(64), Word("."), Word("s"), Word("!"),
	]


def test_string_literal ():

	assert stackseq.tokenizer.tokenize('"song one.txt" load') == [Text("song one.txt"), Word("load")]


def test_unterminated_string ():

	with pytest.raises(stackseq.tokenizer.LexError):
		stackseq.tokenizer.tokenize('"song.txt load')


def test_integer_out_of_range ():

	with pytest.raises(stackseq.tokenizer.LexError):
		stackseq.tokenizer.tokenize("9223372036854775808")


def test_integer_at_limits ():

	assert stackseq.tokenizer.tokenize("9223372036854775807 -9223372036854775808") == [
		Integer(9223372036854775807), Integer(-9223372036854775808),
	]


def test_degree_out_of_range ():

	with pytest.raises(stackseq.tokenizer.LexError):
		stackseq.tokenizer.tokenize("d40000")


def test_lex_error_is_notation_error ():

	assert issubclass(stackseq.tokenizer.LexError, stackseq.tokenizer.NotationError)
