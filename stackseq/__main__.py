import argparse
import logging
import sys
import typing

import stackseq.backend
import stackseq.config
import stackseq.interpreter
import stackseq.midi_utils
import stackseq.repl
import stackseq.tokenizer


logger = logging.getLogger(__name__)


def parse_args (argv: typing.Optional[typing.List[str]] = None) -> argparse.Namespace:

	parser = argparse.ArgumentParser(prog="stackseq", description="Live MIDI sequencer driven by a stack-based notation")
	parser.add_argument("script", nargs="?", help="Script file to load (played with 'p', reloaded with 'r')")
	parser.add_argument("--device", help="MIDI output device name (default: auto-discover)")
	parser.add_argument("--config", default=stackseq.config.DEFAULT_CONFIG_PATH, help="YAML configuration file (default: %(default)s)")
	parser.add_argument("--play", action="store_true", help="Play the script up to its first blank line after loading it")
	parser.add_argument("--list-devices", action="store_true", help="List MIDI output devices and exit")
	parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")

	return parser.parse_args(argv)


def main (argv: typing.Optional[typing.List[str]] = None) -> int:

	"""
	Main entry point for the stackseq application.
	"""

	args = parse_args(argv)

	logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

	if args.list_devices:
		for name in stackseq.midi_utils.list_output_devices():
			print(name)
		return 0

	config = stackseq.config.load_config(args.config)

	device_name, midi_out = stackseq.midi_utils.select_output_device(args.device or config.device_name)

	if midi_out is None:
		return 1

	logger.info(f"stackseq starting on {device_name}")

	backend = stackseq.backend.Backend(midi_out, config.backend)
	backend.start()

	interpreter = stackseq.interpreter.Interpreter(backend.commands)

	try:
		if args.script:
			try:
				interpreter.load_file(args.script)
				if args.play:
					interpreter.autoplay()
			except stackseq.tokenizer.NotationError as e:
				logger.error(f"{type(e).__name__}: {e}")

		stackseq.repl.Repl(interpreter, prompt=config.prompt, history_length=config.history_length).run()

	finally:
		backend.shutdown()

	return 0


if __name__ == "__main__":
	sys.exit(main())
