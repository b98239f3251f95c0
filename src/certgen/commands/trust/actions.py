# certgen/commands/trust/actions.py

from __future__ import annotations

from certgen.commands.helpers import ProgressPrinter, request_from_args, show_result
from certgen.constants import EXIT_OK
from certgen.models.app import App
from certgen.models.requests import TrustRequest
from certgen.services.issuer import trust_certificate
from certgen.utils.formatting import highlight, title


def handle_trust(app: App) -> int:
    request = request_from_args(app, TrustRequest)

    title(f'Trusting CA certificate on [ {highlight(app.trust_installer.platform)} ]', 3)

    with ProgressPrinter(app.show_progress) as progress:
        result = trust_certificate(request, trust_installer=app.trust_installer, on_event=progress)

    show_result(result)

    return EXIT_OK
