# certgen/commands/classes/register.py

from __future__ import annotations

import argparse

from .actions import handle_classes


def register(subparsers: argparse._SubParsersAction) -> None:
    """
    Register the `classes` command.
    """
    parser = subparsers.add_parser(
        'classes',
        add_help=True,
        help='Show the certificate class requirements',
    )

    parser.set_defaults(handler=handle_classes)
