# certgen/commands/cert/actions.py

from __future__ import annotations

from certgen.commands.helpers import ProgressPrinter, request_from_args, show_result
from certgen.constants import EXIT_OK
from certgen.models.app import App
from certgen.models.requests import LeafRequest
from certgen.services.issuer import issue_leaf
from certgen.utils.formatting import highlight, title


def handle_cert(app: App) -> int:
    request = request_from_args(app, LeafRequest)

    title(f'Generating certificate [ {highlight(request.common_name or "")} ]', 3)

    with ProgressPrinter(app.show_progress) as progress:
        result = issue_leaf(request, on_event=progress)

    show_result(result)

    return EXIT_OK
