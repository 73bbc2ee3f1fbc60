import pathlib

import pytest

import stackseq.config


def test_missing_file_gives_defaults (tmp_path: pathlib.Path) -> None:

	config = stackseq.config.load_config(str(tmp_path / "missing.yaml"))

	assert config == stackseq.config.Config()
	assert config.backend.tuning == 12
	assert config.device_name is None


def test_load_yaml (tmp_path: pathlib.Path) -> None:

	path = tmp_path / "stackseq.yaml"
	path.write_text(
		"midi:\n"
		"  device_name: \"FluidSynth\"\n"
		"backend:\n"
		"  tuning: 31\n"
		"  key: -2\n"
		"  bpm: 96\n"
		"  lines_per_beat: 8\n"
		"  idle_interval: 0.002\n"
		"repl:\n"
		"  prompt: \"> \"\n"
		"  history_length: 50\n",
		encoding="utf-8"
	)

	config = stackseq.config.load_config(str(path))

	assert config.device_name == "FluidSynth"
	assert config.backend == stackseq.config.BackendConfig(tuning=31, key=-2, bpm=96, lines_per_beat=8, idle_interval=0.002)
	assert config.prompt == "> "
	assert config.history_length == 50


def test_partial_yaml_keeps_other_defaults (tmp_path: pathlib.Path) -> None:

	path = tmp_path / "stackseq.yaml"
	path.write_text("backend:\n  bpm: 140\n", encoding="utf-8")

	config = stackseq.config.load_config(str(path))

	assert config.backend.bpm == 140
	assert config.backend.tuning == 12
	assert config.backend.lines_per_beat == 4
	assert config.prompt == "? "


def test_empty_yaml (tmp_path: pathlib.Path) -> None:

	path = tmp_path / "stackseq.yaml"
	path.write_text("", encoding="utf-8")

	assert stackseq.config.load_config(str(path)) == stackseq.config.Config()


@pytest.mark.parametrize("field", ["tuning", "bpm", "lines_per_beat"])
def test_non_positive_values_rejected (field: str) -> None:

	with pytest.raises(ValueError):
		stackseq.config.BackendConfig(**{field: 0})


def test_negative_idle_interval_rejected () -> None:

	with pytest.raises(ValueError):
		stackseq.config.BackendConfig(idle_interval=-1)
