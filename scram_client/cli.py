# SPDX-License-Identifier: LGPL-3.0-or-later
"""Drive a single SCRAM conversation over stdin / stdout.

Each client message is written to stdout as one line, and each server
message is read from stdin as one line. This makes it possible to test a
server by hand or to pipe the exchange through another tool.

Example::

    $ scram-client -m SCRAM-SHA-256 -U user
    Password:
    n,,n=user,r=<client nonce>
    r=<client nonce><server nonce>,s=<salt>,i=4096
    c=biws,r=<client nonce><server nonce>,p=<proof>
    v=<server signature>

"""
import argparse
import os
import sys
from getpass import getpass

from .common import ScramConfig
from .constants import SCRAM_MAX_ITERS, SCRAM_MIN_ITERS, ScramMechanism
from .conversation import new_conversation
from .error import ScramError
from .log_config import setup_logging
from .method import new_method


def get_password_material(password: str) -> str:
    """ User may have provided the password itself or an absolute path to a file containing it """
    if os.path.isabs(password):
        with open(password, 'r') as f:
            password = f.read().rstrip('\r\n')

    return password


def get_parser():
    """Construct the argument parser for `scram-client`."""
    parser = argparse.ArgumentParser(description='Authenticate to a SCRAM server over stdin / stdout')

    parser.add_argument(
        '-m',
        '--mechanism',
        choices=[str(m) for m in ScramMechanism],
        default=str(ScramMechanism.SCRAM_SHA_256),
    )
    parser.add_argument('-U', '--username', required=True)
    parser.add_argument('-P', '--password', help='Password or absolute path to a file containing it')
    parser.add_argument('--authzid', help='Authorization identity')
    parser.add_argument('--normalize', help='Apply SASLprep to username and password', action='store_true')
    parser.add_argument('--min-iterations', type=int, default=SCRAM_MIN_ITERS)
    parser.add_argument('--max-iterations', type=int, default=SCRAM_MAX_ITERS)
    parser.add_argument('--log-file')
    parser.add_argument('-d', '--debug', action='store_true')

    return parser


def run_conversation(conversation, stdin, stdout) -> None:
    """Exchange messages until the conversation completes.

    Raises:
        ScramError: authentication failed
        EOFError: stdin ended before the server finished
    """
    client_data, more = conversation.step(b'')
    while True:
        if client_data:
            stdout.write(client_data.decode() + '\n')
            stdout.flush()

        if not more:
            return

        line = stdin.readline()
        if not line:
            raise EOFError('Unexpected end of input while waiting for server message')

        client_data, more = conversation.step(line.rstrip('\r\n').encode())


def main(argv=None, stdin=None, stdout=None):
    """The entry point for scram-client. Run `scram-client -h` to see usage.

    Returns:
        Exit code (0 for a verified server, 1 for any failure).
    """
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    parser = get_parser()
    args = parser.parse_args(argv)

    setup_logging(log_file=args.log_file, debug=args.debug)

    if args.password is None:
        args.password = getpass()

    try:
        password = get_password_material(args.password)
        config = ScramConfig(
            normalize=args.normalize,
            authzid=args.authzid,
            min_iterations=args.min_iterations,
            max_iterations=args.max_iterations,
        )
    except (OSError, ValueError) as e:
        print(f'Invalid arguments: {e}', file=sys.stderr)
        return 1

    conversation = new_conversation(new_method(args.mechanism), args.username, password, config=config)

    try:
        run_conversation(conversation, stdin, stdout)
    except (ScramError, EOFError) as e:
        print(f'Authentication failed: {e}', file=sys.stderr)
        return 1

    print('Server signature verified', file=sys.stderr)
    return 0


if __name__ == '__main__':
    sys.exit(main())
