import pytest

from keysafe.codec import VaultCodec
from keysafe.crypto import CostParameters
from keysafe.storage import StorageManager
from keysafe.vault import Record, Vault

# Minimum Argon2id cost so the suite stays fast
FAST_PARAMS = CostParameters(memory_cost=8, time_cost=1, parallelism=1)


@pytest.fixture
def params():
    return FAST_PARAMS


@pytest.fixture
def codec():
    return VaultCodec()


@pytest.fixture
def vault():
    v = Vault()
    v.upsert(Record(id="1", name="github", username="octocat", password="hunter2",
                    url="https://github.com", notes=None, updated_at="2024-01-01T00:00:00Z"))
    v.upsert(Record(id="2", name="mail", username="me@example.com", password="s3cr3t!",
                    url=None, notes="recovery codes in drawer", updated_at="2024-01-02T00:00:00Z"))
    return v


@pytest.fixture
def vault_path(tmp_path):
    return str(tmp_path / "data" / "vault.bin")


@pytest.fixture
def storage(vault_path, monkeypatch):
    manager = StorageManager(vault_path)
    monkeypatch.setattr(CostParameters, "default", classmethod(lambda cls: FAST_PARAMS))
    return manager
