"""Unit tests for certgen.services.storage module."""

import os

import pytest

from certgen.services import storage
from certgen.services.cert_errors import ArtifactIOError
from certgen.services.storage import artifact_paths, write_artifact


class TestArtifactPaths:
    """Tests for artifact_paths function."""

    def test_paths_with_key(self, tmp_path):
        """Certificate and key share the prefix."""
        paths = artifact_paths(tmp_path, "ca")

        assert paths.certificate_path == tmp_path / "ca.crt"
        assert paths.key_path == tmp_path / "ca.key"

    def test_paths_without_key(self, tmp_path):
        """Certificate-only artifacts have no key path."""
        assert artifact_paths(tmp_path, "signed", with_key=False).key_path is None


class TestWriteArtifact:
    """Tests for write_artifact function."""

    def test_writes_both_files_with_modes(self, tmp_path):
        """Certificate is world readable, key is owner only."""
        paths = write_artifact(tmp_path, "cert", b"CERT", b"KEY")

        assert paths.certificate_path.read_bytes() == b"CERT"
        assert paths.key_path.read_bytes() == b"KEY"
        assert os.stat(paths.certificate_path).st_mode & 0o777 == 0o644
        assert os.stat(paths.key_path).st_mode & 0o777 == 0o600

    def test_certificate_only(self, tmp_path):
        """Without a key only the certificate is written."""
        paths = write_artifact(tmp_path, "trusted", b"CERT")

        assert paths.key_path is None
        assert sorted(p.name for p in tmp_path.iterdir()) == ["trusted.crt"]

    def test_overwrites_existing(self, tmp_path):
        """Existing artifacts are replaced."""
        write_artifact(tmp_path, "cert", b"OLD", b"OLD")
        paths = write_artifact(tmp_path, "cert", b"NEW", b"NEW")

        assert paths.certificate_path.read_bytes() == b"NEW"
        assert paths.key_path.read_bytes() == b"NEW"

    def test_missing_directory(self, tmp_path):
        """Writing into a directory that does not exist fails with the path."""
        with pytest.raises(ArtifactIOError) as exc_info:
            write_artifact(tmp_path / "absent", "cert", b"CERT", b"KEY")

        assert "absent" in exc_info.value.path

    def test_key_failure_does_not_abandon_certificate(self, tmp_path, monkeypatch):
        """If the key write fails the certificate write still completes."""
        real_write = storage.write_bytes

        def _write(path, data, **kwargs):
            if str(path).endswith(".key"):
                raise ArtifactIOError("Permission denied", str(path))
            return real_write(path, data, **kwargs)

        monkeypatch.setattr(storage, "write_bytes", _write)

        with pytest.raises(ArtifactIOError) as exc_info:
            write_artifact(tmp_path, "cert", b"CERT", b"KEY")

        assert exc_info.value.path.endswith("cert.key")
        assert (tmp_path / "cert.crt").read_bytes() == b"CERT"
        assert not (tmp_path / "cert.key").exists()
