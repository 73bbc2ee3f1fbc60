import logging
import typing

import mido

logger = logging.getLogger(__name__)


def list_output_devices () -> typing.List[str]:

	"""Return the names of the MIDI output ports ``mido`` can see."""

	return list(mido.get_output_names())


def select_output_device (
	device_name: typing.Optional[str] = None,
	ask: typing.Callable[[str], str] = input
) -> typing.Tuple[typing.Optional[str], typing.Optional[typing.Any]]:

	"""
	Choose and open the MIDI output the backend will write to.

	- With ``device_name``, opens that port or fails if it does not exist.
	- Without it, opens the only port when there is exactly one, and asks
	  on the console (through ``ask``) when there are several.

	Returns:
		``(device_name, port)``, or ``(None, None)`` when nothing could be opened.
	"""

	try:
		outputs = list_output_devices()
		logger.info(f"Available MIDI outputs: {outputs}")

		if not outputs:
			logger.error("No MIDI output devices found.")
			return None, None

		if device_name is not None:
			if device_name not in outputs:
				logger.error(f"MIDI output device '{device_name}' not found. Available devices: {outputs}")
				return None, None

			selected_name = device_name

		elif len(outputs) == 1:
			selected_name = outputs[0]
			logger.info(f"One MIDI output found - using '{selected_name}'")

		else:
			selected_name = _choose(outputs, ask)

			if selected_name is None:
				return None, None

			print(f"\nTip: pass --device \"{selected_name}\" to skip this prompt.\n")

		midi_out = mido.open_output(selected_name)
		logger.info(f"Opened MIDI output: {selected_name}")

		return selected_name, midi_out

	except Exception as e:
		logger.error(f"Failed to open MIDI output: {e}")
		return None, None


def _choose (outputs: typing.List[str], ask: typing.Callable[[str], str]) -> typing.Optional[str]:

	"""Ask for a port by number until a valid one is given. Returns None on end of input."""

	print("\nAvailable MIDI output devices:\n")
	for i, name in enumerate(outputs, 1):
		print(f"  {i}. {name}")
	print()

	while True:
		try:
			choice = int(ask(f"Select a device (1-{len(outputs)}): "))
			if 1 <= choice <= len(outputs):
				return outputs[choice - 1]
		except ValueError:
			pass
		except EOFError:
			return None
		print(f"Enter a number between 1 and {len(outputs)}.")
