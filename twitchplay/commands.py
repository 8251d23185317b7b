"""Chat command routing.

A command is the text between the first two occurrences of the command
delimiter; options are the comma separated text between the first two
occurrences of the options delimiter. With the defaults::

    "go !jump! now ?high,left?"  ->  command "jump", options ["high", "left"]

Only the first command in a message is considered.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .constants import COMMAND_DELIMITER, OPTIONS_DELIMITER
from .irc.models import ChatMessage
from .logs.logger import logger

CommandCallback = Callable[[str, list[str], str], object]


def get_delimited_string(text: str, delimiter: str) -> str:
    """Return the text enclosed by the first pair of ``delimiter``, or ``""``."""
    if not text or not delimiter:
        return ""
    start = text.find(delimiter)
    if start == -1:
        return ""
    start += len(delimiter)
    end = text.find(delimiter, start)
    if end == -1:
        return ""
    return text[start:end]


class ChatCommandRouter:
    """Maps commands found in chat messages to registered callbacks.

    Callbacks receive ``(command, options, username)``. The router's
    :meth:`handle_message` has the shape of a :class:`TwitchChatClient`
    message callback, so it can be registered with ``client.on_message``.
    """

    def __init__(
        self,
        command_delimiter: str = COMMAND_DELIMITER,
        options_delimiter: str = OPTIONS_DELIMITER,
    ) -> None:
        self.command_delimiter = command_delimiter
        self.options_delimiter = options_delimiter
        self._commands: dict[str, CommandCallback] = {}

    def set_delimiters(self, command_delimiter: str, options_delimiter: str) -> None:
        self.command_delimiter = command_delimiter
        self.options_delimiter = options_delimiter

    @property
    def commands(self) -> list[str]:
        return list(self._commands)

    def register_command(self, name: str, callback: CommandCallback) -> str:
        """Bind ``callback`` to ``name``, replacing any earlier binding.

        Returns a human readable outcome. Raises ValueError for an empty name.
        """
        if not name:
            raise ValueError("Command type string is invalid")
        replaced = name in self._commands
        self._commands[name] = callback
        if replaced:
            return f"{name} command registered. It overwrote a previous registration of the same type"
        return f"{name} command registered"

    def unregister_command(self, name: str) -> str:
        if not name:
            raise ValueError("Command type string is invalid")
        if self._commands.pop(name, None) is None:
            raise KeyError(f"No command of this type was registered: {name}")
        return f"{name} unregistered"

    def get_command(self, message: str) -> str:
        return get_delimited_string(message, self.command_delimiter)

    def get_options(self, message: str) -> list[str]:
        options = get_delimited_string(message, self.options_delimiter)
        return [opt for opt in options.split(",") if opt]

    def handle_message(self, message: ChatMessage) -> bool:
        """Run the callback for the command in ``message``; True if one ran."""
        command = self.get_command(message.text)
        if not command:
            return False
        callback = self._commands.get(command)
        if callback is None:
            return False
        options = self.get_options(message.text)
        try:
            callback(command, options, message.username)
        except Exception as e:  # noqa: BLE001
            logger.log_event(
                "command",
                "handler_error",
                level=logging.ERROR,
                command=command,
                author=message.username,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False
        logger.log_event(
            "command",
            "dispatched",
            level=logging.DEBUG,
            command=command,
            author=message.username,
            options=options,
        )
        return True
