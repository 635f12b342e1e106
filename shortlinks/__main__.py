"""Run the service

Usage:
    python -m shortlinks [--host HOST] [--port PORT] [--config FILE]
"""

import sys
import logging
import argparse

from shortlinks.api import serve
from shortlinks.app import ShortLinks
from shortlinks.exceptions import ConfigurationError
from shortlinks.utils import initialize_logging, load_config


logger = logging.getLogger('shortlinks')


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog='shortlinks', description='In-memory URL shortening service.')
    parser.add_argument('--host', help='Interface to bind (overrides HOST).')
    parser.add_argument('--port', type=int, help='Port to bind (overrides PORT).')
    parser.add_argument('--config', help='YAML settings file (overrides CONFIG_FILE).')
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    try:
        settings = load_config(args.config)
        shortlinks = ShortLinks(settings)
    except ConfigurationError as error:
        initialize_logging()
        logger.error('Invalid configuration.', extra={'error': error.__class__.__name__, 'reason': str(error)})
        return 2

    initialize_logging(settings.log_level)
    # The ASGI lifespan starts the container and closes it on shutdown
    serve(shortlinks, host=args.host, port=args.port)
    return 0


if __name__ == '__main__':
    sys.exit(main())
