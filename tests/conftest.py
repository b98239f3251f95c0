# tests/conftest.py

from __future__ import annotations

import pytest

from certgen.models.requests import CARequest, LeafRequest
from certgen.services.issuer import issue_ca
from certgen.utils.crypto import KeyPair, generate_key_pair
from tests.helpers import subject_fields


class KeyPool:
    """
    Session wide cache of RSA keys, indexed by size and slot.

    Slot N of a size is always the same key, different slots are different
    keys, so a test asking for "the next key" twice still gets two keys.
    """
    def __init__(self):
        self._keys: dict[int, list[KeyPair]] = {}

    def get(self, key_size: int, slot: int = 0) -> KeyPair:
        keys = self._keys.setdefault(key_size, [])
        while len(keys) <= slot:
            keys.append(generate_key_pair(key_size))
        return keys[slot]


@pytest.fixture(scope="session")
def key_pool() -> KeyPool:
    return KeyPool()


@pytest.fixture
def fast_keys(monkeypatch, key_pool):
    """
    Replace key generation in the issuance service with pooled keys.
    Each call within one test hands out the next slot for that size.
    """
    calls: dict[int, int] = {}
    sizes: list[int] = []

    def _generate(key_size: int) -> KeyPair:
        slot = calls.get(key_size, 0)
        calls[key_size] = slot + 1
        sizes.append(key_size)
        return key_pool.get(key_size, slot)

    monkeypatch.setattr("certgen.services.issuer.generate_key_pair", _generate)

    return sizes


@pytest.fixture(scope="session")
def class2_root(tmp_path_factory):
    """ A real Class 2 root CA on disk, shared by the whole session """
    output_dir = tmp_path_factory.mktemp("class2_root")

    request = CARequest.model_validate({
        **subject_fields(commonName="Class 2 Root CA"),
        "type": "root",
        "class": 2,
        "keySize": 4096,
        "validityDays": 3650,
        "outputDir": str(output_dir),
    })

    return issue_ca(request)


@pytest.fixture(scope="session")
def other_root(tmp_path_factory):
    """ An unrelated root CA, for negative chain checks """
    output_dir = tmp_path_factory.mktemp("other_root")

    request = CARequest.model_validate({
        **subject_fields(commonName="Unrelated Root CA"),
        "class": 2,
        "outputDir": str(output_dir),
    })

    return issue_ca(request)


@pytest.fixture
def leaf_request_data(class2_root, tmp_path):
    """ Raw leaf request data issued under `class2_root` """
    return {
        **subject_fields(commonName="example.com"),
        "class": 2,
        "caCert": str(class2_root.certificate_path),
        "caKey": str(class2_root.key_path),
        "outputDir": str(tmp_path / "leaf"),
    }


@pytest.fixture
def leaf_request(leaf_request_data) -> LeafRequest:
    return LeafRequest.model_validate(leaf_request_data)
