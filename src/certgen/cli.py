#!/usr/bin/env python3
"""
#
# certgen - Class-based Certificate Generator
#

Generate root and intermediate CA certificates, issue end-entity certificates
against them, counter-sign existing certificates and install CA certificates
into the operating system trust store. Every certificate is governed by an
assurance class (1 to 3) fixing its key size, validity and key usage.

Requirements:
  - Python 3.9+
  - Cryptography (pyca/cryptography) - https://cryptography.io
  - Pydantic v2, PyYAML
"""
from __future__ import annotations

import argparse
import logging
from typing import Optional, Callable

from certgen import __version__, __title__, __short_title__
from .constants import EXIT_FATAL, EXIT_VALIDATION_ERROR
from .commands import register_all
from .models.app import App
from .utils.formatting import title, error

from .services.cert_errors import CertgenError, ConfigValidationError
from .services.trust_errors import TrustInstallError


def build_parser(prog_desc: str) -> argparse.ArgumentParser:
    """ Build the command line argument parser """

    parser = argparse.ArgumentParser(
        prog=__short_title__,
        description=prog_desc,
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument("-c", "--config",
        required=False,
        metavar="FILE",
        help="YAML request file. Command line flags override its values"
    )

    parser.add_argument("--log-level",
        default="WARNING",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        help="Set logging verbosity",
    )

    parser.add_argument("--no-progress",
        action="store_true",
        help="Do not print per-stage progress",
    )

    parser.add_argument("--version",
        action="version",
        version=f"{__title__} {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="command", required=True)

    register_all(subparsers)

    return parser

# ---------------------
# Entry point
# ---------------------

def main(argv: Optional[list[str]] = None) -> int:

    description: str = f'{__title__} - {__short_title__} v{__version__}'

    parser: argparse.ArgumentParser = build_parser(description)
    args: argparse.Namespace = parser.parse_args(argv)
    handler: Optional[Callable[[App], int]] = getattr(args, "handler", None)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    title(description, 1)

    if handler is None:
        logging.error("Unknown command: %s", getattr(args, "command", None))
        return EXIT_FATAL

    try:
        app: App = App.from_args(args=args)

        return handler(app)

    except ConfigValidationError as e:
        # Request problems, raised before any key is generated
        error(str(e))
        return EXIT_VALIDATION_ERROR
    except CertgenError as e:
        # Crypto, chain and artifact I/O problems
        error(str(e))
        return EXIT_FATAL
    except TrustInstallError as e:
        # OS trust store problems (unsupported platform, permission, tool failure)
        error(str(e))
        return EXIT_FATAL
    except SystemExit:
        raise
    except Exception:
        logging.exception("Unexpected error")
        return EXIT_FATAL

if __name__ == "__main__":
    raise SystemExit(main())
