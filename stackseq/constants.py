"""Constants for stackseq.

MIDI ranges and status bytes, plus the defaults used by the notation and
the playback backend.
"""

# MIDI standard ranges
MIN_NOTE = 0
MAX_NOTE = 127
MIN_VELOCITY = 0
MAX_VELOCITY = 127

# Status bytes (high nibble; the low nibble is the channel)
NOTE_OFF_STATUS = 0x80
NOTE_ON_STATUS = 0x90

# Pitch of Note(0, 0) before the key offset is applied (Middle C)
MIDDLE_C = 60

# Velocity used when `_` stands in for the velocity operand
DEFAULT_VELOCITY = 64

# Velocity of every note-off the backend sends
RELEASE_VELOCITY = 64

# Backend defaults
DEFAULT_TUNING = 12
DEFAULT_KEY = 0
DEFAULT_BPM = 120
DEFAULT_LINES_PER_BEAT = 4

# Seconds the backend sleeps when its queue is empty
DEFAULT_IDLE_INTERVAL = 0.008

# Octave letters: `d` is the neutral octave, `a` is -3 and `h` is +4
OCTAVE_LETTERS = "abcdefgh"
NEUTRAL_OCTAVE_LETTER = "d"

# Numeric limits for literals
INTEGER_MIN = -(2 ** 63)
INTEGER_MAX = 2 ** 63 - 1
DEGREE_MAX = 2 ** 15 - 1
