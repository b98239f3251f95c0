# certgen/constants.py

from __future__ import annotations

"""
Standardised exit codes for certgen CLI commands.

0 = success
1 = validation errors (request or configuration checks failed)
2 = fatal errors (crypto/IO/trust problems, unhandled exceptions)
"""
EXIT_OK: int = 0
EXIT_VALIDATION_ERROR: int = 1
EXIT_FATAL: int = 2

# ---- ANSI Colour Codes ----
COLOUR = {
    'red': '\033[31m',
    'green': '\033[32m',
    'yellow': '\033[33m',
    'cyan': '\033[36m',
    'white': '\033[37m',
    'bold_red': '\033[1;31m',
    'bold_green': '\033[1;32m',
    'bold_yellow': '\033[1;33m',
    'bold_cyan': '\033[1;36m',
    'bold_white': '\033[1;37m',
    'underline_white': '\033[4;37m',
    'bright_white': '\033[97m',
    'reset': '\033[0m'
}

# Convenience shortcuts
COLOUR_ERROR = COLOUR['bold_red']
COLOUR_OK = COLOUR['green']
COLOUR_BRIGHT = COLOUR['bold_white']
COLOUR_WARNING = COLOUR['bold_yellow']
COLOUR_RESET = COLOUR['reset']

# ---- Cryptographic defaults ----
RSA_PUBLIC_EXPONENT = 65537
SERIAL_NUMBER_BITS = 128
KEY_IDENTIFIER_BYTES = 20

# ---- Output defaults ----
DEFAULT_OUTPUT_DIR = 'certs'
DIR_MODE = 0o755
CERT_FILE_MODE = 0o644
KEY_FILE_MODE = 0o600

ARTIFACT_PREFIX = {
    'root': 'ca',
    'intermediate': 'intermediate',
    'leaf': 'cert',
    'signed': 'signed',
    'trusted': 'trusted',
}
CERT_SUFFIX = '.crt'
KEY_SUFFIX = '.key'

# ---- Trust store defaults ----
DARWIN_SYSTEM_KEYCHAIN = '/Library/Keychains/System.keychain'
LINUX_CA_CERT_DEST = '/usr/local/share/ca-certificates/certgen-ca.crt'

# ---- View defaults ----
STATUS_COLUMN = 90
