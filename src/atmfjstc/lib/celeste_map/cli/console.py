"""
Console abstraction for the map inspection tool.

It shows messages of various types (info, success, warnings, errors) in appropriate colors (where available) and on
the appropriate stream (stdout vs stderr). When the tool writes machine-readable output to stdout (e.g. JSON), the
console can be put in pipe mode so that the human-oriented messages do not get mixed into it::

    from atmfjstc.lib.celeste_map.cli.console import console

    console.pipe_mode().print_warning("Map 'x.bin' has no rooms")

Most methods return the console object itself, to enable fluent calls.
"""

import sys

from typing import Optional, Tuple, TextIO
from termcolor import cprint


class Console:
    """
    An abstraction for communicating with the user via the terminal.

    Don't create your own instances of this.
    """

    _stdout_enabled = None

    def __init__(self, enable_stdout: bool = True):
        self._stdout_enabled = enable_stdout

    def print_info(self, message: str, **kwargs) -> 'Console':
        return self.print_message('info', message, **kwargs)

    def print_success(self, message: str, **kwargs) -> 'Console':
        return self.print_message('success', message, **kwargs)

    def print_warning(self, message: str, **kwargs) -> 'Console':
        return self.print_message('warning', message, **kwargs)

    def print_error(self, message: str, **kwargs) -> 'Console':
        return self.print_message('error', message, **kwargs)

    def pipe_mode(self) -> 'Console':
        """
        Disables messages that would normally go to stdout (i.e. anything except warnings and errors), as the
        program's proper output is going there instead.
        """
        self._stdout_enabled = False
        return self

    def normal_mode(self) -> 'Console':
        self._stdout_enabled = True
        return self

    def print_message(self, kind: str, message: str, minor: bool = False) -> 'Console':
        """
        Prints a message of a programmatically specified type.

        Args:
            kind: Can be 'info', 'success', 'warning', 'error' with the meanings as described by the respective
                `print_*` methods.
            message: The message to print. Can be multiline.
            minor: Signals that this message is somehow less important than others of its kind (it will not be bold).

        Returns:
            The console object (to enable a fluent interface)
        """
        props = _PROPS_BY_MSG_TYPE.get(kind, _PROPS_BY_MSG_TYPE['default'])

        channel_name = props.get('channel', 'stdout')
        if channel_name == 'stdout' and not self._stdout_enabled:
            return self

        channel = sys.stderr if channel_name == 'stderr' else sys.stdout

        attrs = props.get('attrs', ())
        if minor and ('bold' in attrs):
            attrs = tuple(attr for attr in attrs if attr != 'bold')

        _print_maybe_with_color(message, props.get('color'), attrs, channel)

        return self


def _print_maybe_with_color(text: str, color: Optional[str], attrs: Tuple[str, ...], channel: TextIO):
    if (color is None) and (len(attrs) == 0):
        print(text, file=channel)
    else:
        cprint(text, color or 'white', attrs=list(attrs), file=channel)


_PROPS_BY_MSG_TYPE = {
    'default': dict(),
    'info': dict(),
    'success': dict(color='green', attrs=('bold',)),
    'warning': dict(color='yellow', attrs=('bold',), channel='stderr'),
    'error': dict(color='red', attrs=('bold',), channel='stderr'),
}


# Singleton
console = Console()
"""The currently active console abstraction."""
