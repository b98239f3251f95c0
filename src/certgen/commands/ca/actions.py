# certgen/commands/ca/actions.py

from __future__ import annotations

from certgen.commands.helpers import ProgressPrinter, request_from_args, show_result
from certgen.constants import EXIT_OK
from certgen.models.app import App
from certgen.models.requests import CARequest, CertificateType
from certgen.services.issuer import issue_ca
from certgen.utils.formatting import title, warning


def handle_ca(app: App) -> int:
    request = request_from_args(app, CARequest)

    title(f'Generating a {request.cert_type.value} CA certificate', 3)

    if request.trust and request.cert_type is not CertificateType.ROOT:
        warning('Only root certificates are installed into the trust store, ignoring --trust')

    with ProgressPrinter(app.show_progress) as progress:
        result = issue_ca(request, on_event=progress, trust_installer=app.trust_installer)

    show_result(result)

    return EXIT_OK
