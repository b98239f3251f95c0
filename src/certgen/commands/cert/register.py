# certgen/commands/cert/register.py

from __future__ import annotations

import argparse

from .actions import handle_cert
from certgen.commands.subject_args import add_issuer_arguments, add_subject_arguments


def register(subparsers: argparse._SubParsersAction) -> None:
    """
    Register the `cert` command.
    """
    parser = subparsers.add_parser(
        'cert',
        add_help=True,
        help='Generate a certificate signed by an existing CA',
    )

    add_subject_arguments(parser)
    add_issuer_arguments(parser)

    parser.add_argument('--dns-names',
        dest='dns_names',
        nargs='+',
        metavar='NAME',
        help='Subject alternative DNS names (default: the common name)'
    )

    parser.set_defaults(handler=handle_cert)
