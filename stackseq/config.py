import dataclasses
import logging
import os
import typing

import yaml

import stackseq.constants


logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = "stackseq.yaml"


@dataclasses.dataclass
class BackendConfig:

	"""
	Initial state of the playback backend.

	Parameters:
		tuning: Steps per pitch period (the ``edo`` value). 12 is standard tuning.
		key: Key offset in steps, added to every pitch.
		bpm: Tempo in beats per minute.
		lines_per_beat: Script lines (ticks) per beat.
		idle_interval: Seconds to sleep when the command queue is empty.
	"""

	tuning: int = stackseq.constants.DEFAULT_TUNING
	key: int = stackseq.constants.DEFAULT_KEY
	bpm: int = stackseq.constants.DEFAULT_BPM
	lines_per_beat: int = stackseq.constants.DEFAULT_LINES_PER_BEAT
	idle_interval: float = stackseq.constants.DEFAULT_IDLE_INTERVAL

	def __post_init__ (self) -> None:

		if self.tuning <= 0:
			raise ValueError("tuning must be positive")

		if self.bpm <= 0:
			raise ValueError("bpm must be positive")

		if self.lines_per_beat <= 0:
			raise ValueError("lines_per_beat must be positive")

		if self.idle_interval < 0:
			raise ValueError("idle_interval must not be negative")


@dataclasses.dataclass
class Config:

	"""Everything read from the configuration file."""

	device_name: typing.Optional[str] = None
	backend: BackendConfig = dataclasses.field(default_factory=BackendConfig)
	prompt: str = "? "
	history_length: int = 1024


def load_config (config_path: str = DEFAULT_CONFIG_PATH) -> Config:

	"""
	Load configuration from a YAML file.

	A missing file is not an error: a warning is logged and the defaults are
	returned. Unknown keys are ignored.

	Example:
		```yaml
		midi:
		  device_name: "FluidSynth"
		backend:
		  tuning: 31
		  bpm: 96
		repl:
		  prompt: "> "
		```
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return Config()

	with open(config_path, 'r') as f:
		raw = yaml.safe_load(f) or {}

	return config_from_dict(raw)


def config_from_dict (raw: typing.Dict[str, typing.Any]) -> Config:

	"""Build a Config from the parsed YAML mapping."""

	midi = raw.get('midi') or {}
	backend = raw.get('backend') or {}
	repl = raw.get('repl') or {}

	backend_config = BackendConfig(
		tuning = int(backend.get('tuning', stackseq.constants.DEFAULT_TUNING)),
		key = int(backend.get('key', stackseq.constants.DEFAULT_KEY)),
		bpm = int(backend.get('bpm', stackseq.constants.DEFAULT_BPM)),
		lines_per_beat = int(backend.get('lines_per_beat', stackseq.constants.DEFAULT_LINES_PER_BEAT)),
		idle_interval = float(backend.get('idle_interval', stackseq.constants.DEFAULT_IDLE_INTERVAL)),
	)

	return Config(
		device_name = midi.get('device_name'),
		backend = backend_config,
		prompt = str(repl.get('prompt', "? ")),
		history_length = int(repl.get('history_length', 1024)),
	)
