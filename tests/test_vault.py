# Tests for the in-memory vault store and its JSON form
#
# Coverage:
#   - upsert replaces by exact name and appends at the end
#   - find returns the first match or raises NotFound
#   - list preserves stored order
#   - Record.create ids and timestamps
#   - JSON serialization of optional fields and payload validation

import json
import re

import pytest

from keysafe.errors import MalformedPayload, NotFound
from keysafe.vault import Record, Vault


def _record(name, password="pw", **kwargs):
    return Record(id=kwargs.pop("id", name), name=name, username="user", password=password,
                  updated_at="2024-01-01T00:00:00Z", **kwargs)


# ── Store Operations ────────────────────────────────────────────────


class TestUpsert:
    def test_appends(self):
        v = Vault()
        v.upsert(_record("a"))
        v.upsert(_record("b"))
        assert [r.name for r in v.list()] == ["a", "b"]

    def test_replaces_same_name(self):
        v = Vault()
        r1 = _record("site", password="old", id="1")
        r2 = _record("site", password="new", id="2")
        v.upsert(r1)
        v.upsert(r2)

        assert v.find("site") == r2
        assert [r.name for r in v.list()].count("site") == 1

    def test_replacement_moves_to_end(self):
        v = Vault()
        for name in ("a", "b", "c"):
            v.upsert(_record(name))
        v.upsert(_record("a", password="changed"))
        assert [r.name for r in v.list()] == ["b", "c", "a"]

    def test_match_is_case_sensitive(self):
        v = Vault()
        v.upsert(_record("Site"))
        v.upsert(_record("site"))
        assert len(v.list()) == 2

    def test_removes_preexisting_duplicates(self):
        v = Vault(entries=[_record("dup", id="1"), _record("other"), _record("dup", id="2")])
        v.upsert(_record("dup", id="3"))
        assert [r.id for r in v.list()] == ["other", "3"]


class TestFind:
    def test_found(self):
        v = Vault()
        v.upsert(_record("a"))
        assert v.find("a").name == "a"

    def test_not_found(self):
        with pytest.raises(NotFound) as exc_info:
            Vault().find("missing")
        assert exc_info.value.name == "missing"

    def test_first_of_duplicates(self):
        v = Vault(entries=[_record("dup", id="1"), _record("dup", id="2")])
        assert v.find("dup").id == "1"


class TestList:
    def test_order_and_copy(self):
        v = Vault(entries=[_record("b"), _record("a")])
        listed = v.list()
        assert [r.name for r in listed] == ["b", "a"]
        listed.clear()
        assert len(v.entries) == 2


# ── Records ─────────────────────────────────────────────────────────


class TestRecord:
    def test_create(self):
        r = Record.create("name", "user", "pw", url="https://example.com")
        assert r.name == "name"
        assert r.url == "https://example.com"
        assert r.notes is None
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z", r.updated_at)

    def test_create_unique_ids(self):
        assert Record.create("a", "u", "p").id != Record.create("a", "u", "p").id


# ── Serialization ───────────────────────────────────────────────────


class TestSerialization:
    def test_round_trip(self, vault):
        assert Vault.from_bytes(vault.to_bytes()) == vault

    def test_null_optionals(self):
        v = Vault(entries=[_record("a")])
        data = json.loads(v.to_bytes())
        assert data["entries"][0]["url"] is None
        assert data["entries"][0]["notes"] is None

    def test_empty_string_optionals_preserved(self):
        v = Vault(entries=[_record("a", url="", notes="")])
        decoded = Vault.from_bytes(v.to_bytes())
        assert decoded.find("a").url == ""
        assert decoded.find("a").notes == ""

    def test_unknown_keys_ignored(self):
        payload = json.dumps({
            "entries": [dict(_record("a").to_dict(), extra=1)],
            "metadata": {"version": 1},
        }).encode()
        assert Vault.from_bytes(payload).find("a").name == "a"

    @pytest.mark.parametrize("payload", [
        b"\xff\xfe",
        b"[]",
        b"{}",
        b'{"entries": {}}',
        b'{"entries": [1]}',
        b'{"entries": [{"id": "1", "name": "a", "username": "u", "password": 5, "updated_at": "t"}]}',
        b'{"entries": [{"id": "1", "name": "a", "username": "u", "password": "p", "updated_at": "t", "url": 3}]}',
    ])
    def test_malformed(self, payload):
        with pytest.raises(MalformedPayload):
            Vault.from_bytes(payload)
