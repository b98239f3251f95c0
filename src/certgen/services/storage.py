# certgen/services/storage.py

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from certgen.constants import CERT_FILE_MODE, CERT_SUFFIX, KEY_FILE_MODE, KEY_SUFFIX
from certgen.utils.files import StrPath, write_bytes

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArtifactPaths:
    certificate_path: Path
    key_path: Optional[Path] = None


def artifact_paths(output_dir: StrPath, prefix: str, *, with_key: bool = True) -> ArtifactPaths:
    """ Where `<prefix>.crt` / `<prefix>.key` land inside `output_dir` """
    base = Path(output_dir)
    return ArtifactPaths(
        certificate_path=base / f"{prefix}{CERT_SUFFIX}",
        key_path=base / f"{prefix}{KEY_SUFFIX}" if with_key else None,
    )


def write_artifact(
        output_dir: StrPath,
        prefix: str,
        certificate_pem: bytes,
        key_pem: Optional[bytes] = None
    ) -> ArtifactPaths:
    """
    Persist a certificate (and optionally its private key) into `output_dir`.

    The certificate is written 0644 and the key 0600. The two writes run
    concurrently and are both joined before returning, so a failure in one
    never abandons the other mid-write. Nothing is cleaned up on failure.

    Args:
        output_dir: Existing, writable directory.
        prefix: Artifact base name, e.g. 'ca' or 'cert'.
        certificate_pem: PEM encoded certificate.
        key_pem: PEM encoded PKCS#8 private key, or None for certificate-only artifacts.

    Returns:
        ArtifactPaths

    Raises:
        ArtifactIOError: The first failing write, naming its path.
    """
    paths = artifact_paths(output_dir, prefix, with_key=key_pem is not None)

    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="certgen-write") as pool:
        futures = [pool.submit(write_bytes, paths.certificate_path, certificate_pem,
                               mode=CERT_FILE_MODE)]
        if key_pem is not None:
            futures.append(pool.submit(write_bytes, paths.key_path, key_pem,
                                       mode=KEY_FILE_MODE))

        # result() re-raises the worker's ArtifactIOError
        for future in futures:
            future.result()

    log.debug("Wrote artifact %s to %s", prefix, output_dir)

    return paths
