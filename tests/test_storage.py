# Tests for vault file persistence
#
# Coverage:
#   - initialize creates the directory and an empty vault; refuses to overwrite
#   - load of a missing file yields an empty vault
#   - save/load round trip with whole-file replacement
#   - Cost parameters carried from load to the next save
#   - Owner-only permissions, scratch file cleanup, IoError wrapping

import os
import stat
import sys

import pytest

from keysafe.crypto import CostParameters
from keysafe.errors import AlreadyExists, AuthenticationFailure, BadMagic, IoError
from keysafe.storage import StorageManager
from keysafe.vault import Record, Vault

PASSWORD = "master"


class TestInitialize:
    def test_creates_empty_vault(self, storage, vault_path):
        storage.initialize(PASSWORD)
        assert os.path.exists(vault_path)
        assert storage.load(PASSWORD) == Vault()

    def test_refuses_existing(self, storage, vault_path):
        storage.initialize(PASSWORD)
        with open(vault_path, "rb") as f:
            before = f.read()

        with pytest.raises(AlreadyExists):
            storage.initialize("other password")
        with open(vault_path, "rb") as f:
            assert f.read() == before

    def test_explicit_params(self, vault_path):
        params = CostParameters(memory_cost=16, time_cost=1, parallelism=1)
        manager = StorageManager(vault_path)
        manager.initialize(PASSWORD, params)
        assert manager.params == params


class TestLoadSave:
    def test_missing_file_is_empty(self, storage):
        assert not storage.exists()
        assert storage.load(PASSWORD) == Vault()

    def test_round_trip(self, storage, vault):
        storage.save(vault, PASSWORD)
        assert StorageManager(storage.filepath).load(PASSWORD) == vault

    def test_save_rewrites_whole_file(self, storage, vault_path):
        storage.initialize(PASSWORD)
        with open(vault_path, "rb") as f:
            first = f.read()

        v = storage.load(PASSWORD)
        v.upsert(Record.create("a", "u", "p"))
        storage.save(v, PASSWORD)
        with open(vault_path, "rb") as f:
            second = f.read()

        assert first[17:45] != second[17:45]
        assert storage.load(PASSWORD).find("a").password == "p"

    def test_wrong_password(self, storage, vault):
        storage.save(vault, PASSWORD)
        with pytest.raises(AuthenticationFailure):
            StorageManager(storage.filepath).load("wrong")

    def test_not_a_vault(self, storage, vault_path):
        os.makedirs(os.path.dirname(vault_path))
        with open(vault_path, "wb") as f:
            f.write(b"hello, this is definitely not a vault file at all!")
        with pytest.raises(BadMagic):
            storage.load(PASSWORD)

    def test_params_reused_from_load(self, vault_path, vault):
        params = CostParameters(memory_cost=16, time_cost=2, parallelism=1)
        StorageManager(vault_path).save(vault, PASSWORD, params)

        reopened = StorageManager(vault_path)
        loaded = reopened.load(PASSWORD)
        assert reopened.params == params
        reopened.save(loaded, PASSWORD)

        with open(vault_path, "rb") as f:
            header, _ = reopened.codec.read_header(f.read())
        assert header.params == params

    def test_no_scratch_file_left(self, storage, vault, vault_path):
        storage.save(vault, PASSWORD)
        assert not os.path.exists(vault_path + ".tmp")

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    def test_owner_only_permissions(self, storage, vault, vault_path):
        storage.save(vault, PASSWORD)
        assert stat.S_IMODE(os.stat(vault_path).st_mode) == 0o600


class TestIoErrors:
    def test_unreadable_path(self, tmp_path):
        # a directory where the vault file should be
        path = tmp_path / "vault.bin"
        path.mkdir()
        with pytest.raises(IoError):
            StorageManager(str(path)).load(PASSWORD)

    def test_write_failure_cleans_up(self, storage, vault, vault_path, monkeypatch):
        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("keysafe.storage.os.replace", fail_replace)
        with pytest.raises(IoError):
            storage.save(vault, PASSWORD)
        assert not os.path.exists(vault_path)
        assert not os.path.exists(vault_path + ".tmp")
