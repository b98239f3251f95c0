# certgen/commands/sign/register.py

from __future__ import annotations

import argparse

from .actions import handle_sign


def register(subparsers: argparse._SubParsersAction) -> None:
    """
    Register the `sign` command.
    """
    parser = subparsers.add_parser(
        'sign',
        add_help=True,
        help='Sign an existing certificate with a CA',
    )
    parser.add_argument('--cert',
        dest='cert_path',
        help='The certificate to sign (PEM)'
    )
    parser.add_argument('--key',
        dest='key_path',
        help='The private key belonging to --cert (PEM)'
    )
    parser.add_argument('--ca-cert',
        dest='ca_cert_path',
        help='The signing CA certificate (PEM)'
    )
    parser.add_argument('--ca-key',
        dest='ca_key_path',
        help='The signing CA private key (PEM)'
    )
    parser.add_argument('--output-dir',
        dest='output_dir',
        help='Directory signed.crt is written to (default: certs)'
    )

    parser.set_defaults(handler=handle_sign)
