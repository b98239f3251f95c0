# certgen/commands/__init__.py

from __future__ import annotations

import argparse

from . import ca, cert, classes, sign, trust

def register_all(subparsers: argparse._SubParsersAction) -> None:
    """
    Register all subcommands here
    """
    ca.register(subparsers)
    cert.register(subparsers)
    sign.register(subparsers)
    trust.register(subparsers)
    classes.register(subparsers)
