# certgen/models/app.py

import logging
from argparse import Namespace
from dataclasses import dataclass
from typing import Optional

from certgen.models.requests import CertificateType
from certgen.services.trust import TrustInstaller, select_trust_installer

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class App:
    """
    Lightweight application context passed to all handlers.
    Holds long-lived service singletons and shared runtime config.
    """
    args: Namespace
    trust_installer: Optional[TrustInstaller]

    @classmethod
    def from_args(cls, args: Namespace) -> "App":
        trust_installer: Optional[TrustInstaller] = None

        cmd = getattr(args, "command", "")

        # trustlike: commands that touch the OS trust store; only roots are trusted
        trustlike = cmd == "trust" or (
            cmd == "ca"
            and getattr(args, "trust", None)
            and getattr(args, "cert_type", None) != CertificateType.INTERMEDIATE.value
        )

        if trustlike:
            trust_installer = select_trust_installer()
            log.debug("Selected %s trust installer", trust_installer.platform)
        else:
            log.debug("Skipping trust installer selection for command: %s", cmd)

        return cls(args=args, trust_installer=trust_installer)

    @property
    def config_path(self) -> Optional[str]:
        return getattr(self.args, "config", None)

    @property
    def show_progress(self) -> bool:
        return not getattr(self.args, "no_progress", False)
