# certgen/commands/helpers.py

from __future__ import annotations

import argparse
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel

from certgen.models.app import App
from certgen.services.config import load_request
from certgen.services.issuer import IssuanceEvent, IssuanceResult
from certgen.utils.datetime import format_datetime
from certgen.utils.formatting import highlight, print_result, title

ModelT = TypeVar("ModelT", bound=BaseModel)

STAGE_TITLES = {
    "validate": "Validating request",
    "prepare_output": "Preparing output directory",
    "load_issuer": "Loading issuer certificate and key",
    "load_certificate": "Loading certificate",
    "generate_key": "Generating RSA key",
    "sign": "Signing certificate",
    "write": "Writing artifacts",
    "trust": "Installing into the trust store",
}


def prune_opts(model: Type[BaseModel], ns: argparse.Namespace) -> Dict[str, Any]:
    """
    Prune an argparse namespace down to fields the Pydantic model knows about.
    Unknown args (config, log_level, handler, etc.) and unset flags are dropped
    so values from the configuration file and model defaults survive.
    """
    data = vars(ns)
    allowed = model.model_fields.keys()

    return {k: data[k] for k in allowed if data.get(k) is not None}


def request_from_args(app: App, model: Type[ModelT]) -> ModelT:
    """
    Build a request from the optional --config file with CLI flags on top
    """
    return load_request(app.config_path, model, prune_opts(model, app.args))


class ProgressPrinter:
    """
    Renders IssuanceEvent values as coloured status lines.

    Used as a context manager so a stage that raises is closed with FAILED
    before the error propagates.
    """
    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._open: Optional[str] = None

    def __call__(self, event: IssuanceEvent) -> None:
        if not self.enabled:
            return

        if not event.done:
            title(STAGE_TITLES.get(event.stage, event.stage), 9)
            self._open = event.stage
        else:
            print_result(True)
            self._open = None

    def __enter__(self) -> "ProgressPrinter":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is not None and self._open is not None:
            print_result(False)
            self._open = None
        return False


def show_result(result: IssuanceResult) -> None:
    certificate = result.certificate

    title(f'Subject [ {highlight(certificate.subject.rfc4514_string())} ]', 7)
    title(f'Issuer [ {highlight(certificate.issuer.rfc4514_string())} ]', 7)
    title(f'Serial [ {highlight(format(certificate.serial_number, "x"))} ]', 7)
    title(f'Expires [ {highlight(format_datetime(certificate.not_valid_after_utc, "text"))} ]', 7)
    title(f'Certificate [ {highlight(str(result.certificate_path))} ]', 7)

    if result.key_path is not None:
        title(f'Private key [ {highlight(str(result.key_path))} ]', 7)
