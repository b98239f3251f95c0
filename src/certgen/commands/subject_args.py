# certgen/commands/subject_args.py

from __future__ import annotations

import argparse


def add_subject_arguments(parser: argparse.ArgumentParser) -> None:
    """
    Identity, class and output flags shared by `ca` and `cert`.

    Every flag defaults to None so a value from the configuration file is
    only overridden when the flag is actually given.
    """
    parser.add_argument('-n', '--common-name',
        dest='common_name',
        help='The CN (Common Name) of the certificate'
    )
    parser.add_argument('-o', '--org',
        dest='organization',
        help='The organisation to use in the certificate subject'
    )
    parser.add_argument('--ou',
        dest='organizational_unit',
        help='The organisational unit to use in the certificate subject'
    )
    parser.add_argument('--country',
        help='The two-letter country code to use in the certificate subject'
    )
    parser.add_argument('--province',
        help='The state or province to use in the certificate subject'
    )
    parser.add_argument('--locality',
        help='The city or locality to use in the certificate subject'
    )
    parser.add_argument('--class',
        dest='cert_class',
        type=int,
        help='Certificate class, 1 (low) to 3 (high assurance)'
    )
    parser.add_argument('--validity',
        dest='validity_days',
        type=int,
        help='Validity in days (default: the class maximum)'
    )
    parser.add_argument('--key-size',
        dest='key_size',
        type=int,
        help='RSA key size in bits (default: the class minimum)'
    )
    parser.add_argument('--output-dir',
        dest='output_dir',
        help='Directory the certificate and key are written to (default: certs)'
    )


def add_issuer_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--ca-cert',
        dest='ca_cert',
        help='The issuing CA certificate (PEM)'
    )
    parser.add_argument('--ca-key',
        dest='ca_key',
        help='The issuing CA private key (PEM)'
    )
