# certgen/commands/trust/register.py

from __future__ import annotations

import argparse

from .actions import handle_trust


def register(subparsers: argparse._SubParsersAction) -> None:
    """
    Register the `trust` command.
    """
    parser = subparsers.add_parser(
        'trust',
        add_help=True,
        help='Install a CA certificate into the operating system trust store',
    )
    parser.add_argument('--cert',
        dest='cert_path',
        help='The CA certificate to trust (PEM)'
    )
    parser.add_argument('--output-dir',
        dest='output_dir',
        help='Directory the trusted.crt copy is written to (default: certs)'
    )

    parser.set_defaults(handler=handle_trust)
