"""Entry point for kanadrill CLI client."""

import argparse
import logging
import sys

from cli.api_client import DrillAPIClient
from cli.console import ConsoleUI


def main():
    parser = argparse.ArgumentParser(description='Kanadrill - kana and vocabulary romaji drill')
    parser.add_argument(
        '--server',
        default='http://localhost:8000',
        help='Server URL (default: http://localhost:8000)'
    )
    parser.add_argument(
        '--user',
        default='default',
        help='User ID (default: default)'
    )
    parser.add_argument(
        '--local',
        action='store_true',
        help='Run the drill in-process with file storage instead of talking to a server'
    )
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if args.local:
        from cli.local_backend import LocalBackend
        from server.file_storage import FileStorage
        backend = LocalBackend(FileStorage(), user_id=args.user)
    else:
        backend = DrillAPIClient(base_url=args.server, user_id=args.user)
    ui = ConsoleUI(backend)

    try:
        ui.run()
    except (KeyboardInterrupt, EOFError):
        print('\nGoodbye!')
        sys.exit(0)


if __name__ == '__main__':
    main()
