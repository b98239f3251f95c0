# certgen/reports/class_table.py

from __future__ import annotations

from certgen.constants import COLOUR, COLOUR_RESET, EXIT_OK
from certgen.services.policy import (
    POLICY_TABLE,
    ROOT_MIN_CLASS,
    ROOT_MIN_KEY_SIZE,
    ROOT_MIN_VALIDITY_DAYS,
    describe,
    describe_usages,
)
from certgen.utils.formatting import title


def class_rows() -> list[dict]:
    """
    One row per certificate class, straight from the policy table
    """
    rows = []

    for cert_class, requirements in POLICY_TABLE.items():
        rows.append({
            "class": int(cert_class),
            "min_key_size": requirements.min_key_size,
            "max_validity_days": requirements.max_validity_days,
            "max_path_length": requirements.max_path_length,
            "usages": describe_usages(requirements.extended_key_usages),
            "description": describe(cert_class),
        })

    return rows


def class_table(rows: list[dict], *, report_title: str) -> int:
    """
    Render the certificate class table from pre-collected rows.
    No dependency on `App`.
    """
    title(report_title, level=2)

    headers = ["class", "min key", "max days", "path len", "extended key usage"]
    row_format = "{:<6} {:<8} {:<9} {:<9} {:<50}"

    print(row_format.format(*headers))
    print("-" * 86)

    colours = [COLOUR["white"], COLOUR["bright_white"]]

    for index, row in enumerate(rows):
        print(
            colours[index % 2] + row_format.format(
                row["class"],
                row["min_key_size"],
                row["max_validity_days"],
                row["max_path_length"],
                row["usages"],
            )
            + COLOUR_RESET
        )

    print()

    for row in rows:
        print(f'Class {row["class"]}: {row["description"]}')

    print(
        f'\nRoot certificates: Class {int(ROOT_MIN_CLASS)} or higher, at least '
        f'{ROOT_MIN_KEY_SIZE}-bit keys and {ROOT_MIN_VALIDITY_DAYS} days validity'
    )

    return EXIT_OK
