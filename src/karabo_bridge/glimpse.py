""" Command line tool to take a quick look at what a bridge server sends.
    By default each reply is summarized field by field; with --raw every
    frame is dumped with its full structure instead.
"""

import argparse
import logging
import sys

from . import config
from .client import Client
from .errors import BridgeError


def parse_arguments(arguments=None):

    parser = argparse.ArgumentParser(prog='karabo-bridge-glimpse', description=__doc__)

    parser.add_argument('endpoint', nargs='?', default=None,
        help='bridge server to connect to, for example tcp://localhost:4545 (default: %s)' % (config.default_endpoint))
    parser.add_argument('-n', '--count', type=int, default=1,
        help='number of replies to request (default: 1)')
    parser.add_argument('--raw', action='store_true',
        help='dump the raw structure of every frame instead of a summary')
    parser.add_argument('--log-level', default=config.log_level,
        help='logging level (default: %s)' % (config.log_level))

    return parser.parse_args(arguments)



def main(arguments=None):

    arguments = parse_arguments(arguments)

    logging.basicConfig(level=config.logging_level(arguments.log_level),
                        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s')

    with Client() as client:
        client.connect(arguments.endpoint)

        for _ in range(arguments.count):
            try:
                if arguments.raw:
                    client.show_msg(sys.stdout)
                else:
                    sys.stdout.write(client.show_next())
            except BridgeError as e:
                sys.stderr.write('%s: %s\n' % (type(e).__name__, e))
                return 1

    return 0



if __name__ == '__main__':
    sys.exit(main())


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
