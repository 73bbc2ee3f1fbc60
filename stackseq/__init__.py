"""
stackseq - a live MIDI sequencer driven by a stack-based text notation.

Lines of notation are typed at a prompt or read from a script. Values are
pushed onto a stack and command words consume them, so a whole phrase is a
flat run of tokens with no separate grammar::

    140 bpm 4 lps         -- tempo and lines per beat
    0 d0 100 + 0 d4 _ +   -- two notes on channel 0 (`_` = default velocity)
    4 w                   -- wait four lines
    s                     -- release everything

Notes are written as an octave letter and a step: ``d0`` is Middle C, ``e0``
one period up, ``c7`` seven steps above the period below. The number of
steps per period is the tuning (``31 edo`` for 31 equal divisions), so the
same notation covers microtonal scales.

Pieces:

- **Tokenizer** (``stackseq.tokenizer``) - text to tokens.
- **Interpreter** (``stackseq.interpreter``) - the stack machine; also
  plays line ranges of a script with ``p``.
- **Backend** (``stackseq.backend``) - a thread that owns tempo, tuning and
  sounding notes and writes MIDI through ``mido``.

Run it with::

    python -m stackseq song.txt --play

Package-level exports: ``Backend``, ``Interpreter``, ``tokenize``.
"""

import stackseq.backend
import stackseq.interpreter
import stackseq.tokenizer


Backend = stackseq.backend.Backend
Interpreter = stackseq.interpreter.Interpreter
tokenize = stackseq.tokenizer.tokenize
