# certgen/commands/classes/actions.py

from __future__ import annotations

from certgen.models.app import App
from certgen.reports.class_table import class_rows, class_table


def handle_classes(app: App) -> int:
    return class_table(class_rows(), report_title='Certificate Classes')
