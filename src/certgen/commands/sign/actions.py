# certgen/commands/sign/actions.py

from __future__ import annotations

from certgen.commands.helpers import ProgressPrinter, request_from_args, show_result
from certgen.constants import EXIT_OK
from certgen.models.app import App
from certgen.models.requests import SignRequest
from certgen.services.issuer import sign_certificate
from certgen.utils.formatting import title


def handle_sign(app: App) -> int:
    request = request_from_args(app, SignRequest)

    title('Signing an existing certificate', 3)

    with ProgressPrinter(app.show_progress) as progress:
        result = sign_certificate(request, on_event=progress)

    show_result(result)

    return EXIT_OK
