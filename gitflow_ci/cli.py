import os
import sys
from functools import partial
from typing import TextIO

import colors

_ERROR_COLOR = partial(colors.color, fg='red')
_WARN_COLOR = partial(colors.color, fg='yellow')
_ACTION_COLOR = partial(colors.color, fg='cyan')

__enable_color = False


def set_allow_color(allow):
    global __enable_color
    __enable_color = allow and supports_color()


def supports_color():
    """
    Returns True if the running system's terminal supports color, and False
    otherwise.
    """
    plat = sys.platform
    supported_platform = plat != 'Pocket PC' and (plat != 'win32' or
                                                  'ANSICON' in os.environ)
    # isatty is not always implemented, #6223.
    is_a_tty = hasattr(sys.stdout, 'isatty') and sys.stdout.isatty()
    if not supported_platform or not is_a_tty:
        return False
    return True


def print(message):
    sys.stdout.write(message)
    if not message.endswith('\n'):
        sys.stdout.write('\n')


def fcwrite(out: TextIO, color, message: str):
    if __enable_color and color is not None:
        out.write(color(message))
    else:
        out.write(message)


def fcwriteln(out: TextIO, color, message: str = None):
    if message is not None:
        fcwrite(out, color, message + os.linesep)
    else:
        fcwrite(out, color, os.linesep)


def eprint(message: str):
    fcwriteln(sys.stderr, _ERROR_COLOR, message)


def warn(message: str):
    fcwriteln(sys.stderr, _WARN_COLOR, message)


def if_none(obj, default=""):
    if obj is None:
        return default
    return str(obj)


class ConsoleLogger(object):
    """
    Prints the messages of a Gitflow action in the format 'Gitflow - <action name>: <message>'.
    """
    MESSAGE_FORMAT = "Gitflow - {action_name}: {message}"

    action_name: str = None

    def __init__(self, action_name: str):
        self.action_name = action_name

    def format(self, message: str) -> str:
        return self.MESSAGE_FORMAT.format(action_name=self.action_name, message=message)

    def println(self, message: str):
        fcwriteln(sys.stdout, _ACTION_COLOR, self.format(message))

    def warn(self, message: str):
        warn(self.format(message))
