# certgen/commands/ca/register.py

from __future__ import annotations

import argparse

from .actions import handle_ca
from certgen.commands.subject_args import add_issuer_arguments, add_subject_arguments


def register(subparsers: argparse._SubParsersAction) -> None:
    """
    Register the `ca` command.
    """
    parser = subparsers.add_parser(
        'ca',
        add_help=True,
        help='Generate a root or intermediate CA certificate',
    )

    kind = parser.add_mutually_exclusive_group(
        required=False
    )
    kind.add_argument('--root',
        dest='cert_type',
        action='store_const',
        const='root',
        help='Generate a self-signed root CA (default)'
    )
    kind.add_argument('--intermediate',
        dest='cert_type',
        action='store_const',
        const='intermediate',
        help='Generate an intermediate CA signed by --ca-cert / --ca-key'
    )

    add_subject_arguments(parser)
    add_issuer_arguments(parser)

    parser.add_argument('--trust',
        action='store_true',
        default=None,
        help='Install the new root CA into the operating system trust store'
    )

    parser.set_defaults(handler=handle_ca, cert_type=None)
