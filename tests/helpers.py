# tests/helpers.py

from __future__ import annotations


def subject_fields(**overrides) -> dict:
    """ A complete, valid subject keyed the way configuration files spell it """
    fields = {
        "commonName": "Test Certificate Authority",
        "organization": "Test Organisation",
        "organizationalUnit": "Web Services",
        "country": "AU",
        "province": "ACT",
        "locality": "Canberra",
    }
    fields.update(overrides)
    return fields
