#!/usr/bin/env python3
"""
Console host for the TwitchPlay chat client.

Reads TWITCH_OAUTH_TOKEN / TWITCH_USERNAME / TWITCH_CHANNEL from the
environment, connects, prints chat and connection events, and answers the
``!ping!`` chat command. Lines typed on stdin are not read; this is a poll
loop sample for embedding hosts.
"""

import logging
import sys
import time

from twitchplay import ChatCommandRouter, ConnectionEventType, TwitchChatClient
from twitchplay.config import load_config_from_env
from twitchplay.errors import InvalidParametersError, log_error
from twitchplay.logging_config import LoggerConfigurator
from twitchplay.logs import logger

TICK_SECONDS = 1 / 30


def main() -> int:
    """Main function"""
    LoggerConfigurator().configure()
    logger.log_event("app", "start")

    try:
        config = load_config_from_env()
    except InvalidParametersError as e:
        logger.log_event("app", "config_error", level=logging.ERROR, error=str(e))
        return 1

    client = TwitchChatClient()
    router = ChatCommandRouter()
    router.register_command(
        "ping", lambda _command, _options, username: client.send_chat(f"@{username} pong")
    )

    @client.on_connection_event
    def _print_event(event):
        print(f"[{event.type.name}] {event.message}")

    @client.on_message
    def _print_message(message):
        print(f"#{message.channel} {message.username}: {message.text}")
        router.handle_message(message)

    if not client.connect(config):
        client.poll()
        return 1

    exit_code = 0
    try:
        while True:
            result = client.poll()
            terminal = [e for e in result.events if e.is_terminal]
            if terminal:
                if terminal[-1].type is not ConnectionEventType.DISCONNECTED:
                    exit_code = 1
                break
            time.sleep(TICK_SECONDS)
    except KeyboardInterrupt:
        logger.log_event("app", "interrupted", level=logging.WARNING)
        client.disconnect(graceful=True)
        client.poll()
    except Exception as e:  # noqa: BLE001
        log_error("Main application error", e)
        client.close()
        exit_code = 1
    finally:
        logger.log_event("app", "shutdown")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
