"""
Error handling for the map inspection tool.

Map decoding failures are expected (many downloaded files are corrupt or of a different format) and are reported per
file by the tool itself. This module handles everything else: problems that should stop the program with a clear
message (`DescriptiveError`), and genuine bugs, which are shown with a full trace.
"""

import sys
import traceback

from typing import Callable, List
from textwrap import dedent, indent
from functools import wraps

from atmfjstc.lib.celeste_map.cli.console import console


class DescriptiveError(RuntimeError):
    """
    An exception class for errors where it is clear from the message what happened and where, and the traceback is
    redundant (e.g. a map file that cannot be read).

    When a `DescriptiveError` reaches a `pretty_unhandled` main function, just its message is shown.
    """


def format_exception_head(exception: BaseException) -> str:
    """
    Formats the class and message of an exception as they would appear when printed by Python's exception handler.
    There is no newline at the end.
    """
    return ''.join(traceback.format_exception_only(exception.__class__, exception)).rstrip()


def format_exception_trace(exception: BaseException) -> str:
    """
    Formats the traceback part of an exception, without the ``'Traceback:'`` header and with a base indent of 0.
    """
    return dedent(''.join(traceback.format_list(traceback.extract_tb(exception.__traceback__))).rstrip())


def short_format_exception(exception: BaseException) -> str:
    """
    Presents an exception in a short format, e.g. for reporting that a single map failed to decode.

    For a `DescriptiveError`, just the message is shown; for other exceptions, the class name is shown too.
    Exceptions in `__cause__` are included, indented, so the result may be multiline.
    """

    causes = _causal_chain(exception)

    if isinstance(exception, DescriptiveError):
        return '\n'.join([str(exception) or exception.__class__.__name__, *(
            indent(format_exception_head(cause), '  ') for cause in causes[1:]
        )])

    return '\n'.join(
        indent(format_exception_head(cause), '  ' if index > 0 else '') for index, cause in enumerate(causes)
    )


def pretty_print_exception(exception: BaseException):
    """
    Prints an exception on the console in an informative way.

    `KeyboardInterrupt` and `DescriptiveError` are shown as simple messages. All other exceptions are assumed to be
    bugs and are shown with a full stack trace.
    """

    if isinstance(exception, SystemExit):
        return
    if isinstance(exception, KeyboardInterrupt):
        console.print_warning("Stopped by user")
        return
    if isinstance(exception, DescriptiveError):
        console.print_error(short_format_exception(exception))
        return

    for index, cause in enumerate(_causal_chain(exception)):
        base_indent = '' if index == 0 else '  '

        if index > 0:
            console.print_error("Cause:", minor=True)

        console.print_error(indent(format_exception_head(cause), base_indent))
        console.print_error(base_indent + "Traceback:", minor=True)
        console.print_error(indent(format_exception_trace(cause), base_indent + '  '), minor=True)


def _causal_chain(exception: BaseException) -> List[BaseException]:
    result = [exception]

    while exception.__cause__ is not None:
        exception = exception.__cause__
        result.append(exception)

    return result


def pretty_unhandled() -> Callable:
    """
    Decorator for a main function that causes unhandled exceptions to be displayed in a pretty way.

    ``sys.exit(-1)`` is called if an exception occurs. `SystemExit` passes through unchanged, and
    `KeyboardInterrupt` exits with code 0.
    """

    def real_decorator(main_function):
        @wraps(main_function)
        def wrapper(*args, **kwargs):
            try:
                return main_function(*args, **kwargs)
            except SystemExit:
                raise
            except KeyboardInterrupt as e:
                pretty_print_exception(e)
                sys.exit(0)
            except BaseException as e:
                pretty_print_exception(e)

            sys.exit(-1)

        return wrapper

    return real_decorator
