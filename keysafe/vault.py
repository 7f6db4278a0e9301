"""
In-memory vault: credential records and the name-keyed store operations.

The vault is serialized to JSON for use as the AEAD plaintext:

    {"entries": [{"id": ..., "name": ..., "username": ..., "password": ...,
                  "url": null, "notes": null, "updated_at": ...}, ...]}
"""

import datetime
import json
import logging
import uuid
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from keysafe.errors import MalformedPayload, NotFound

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("id", "name", "username", "password", "updated_at")
_OPTIONAL_FIELDS = ("url", "notes")


def now_iso() -> str:
    """Current time as an ISO-8601 UTC timestamp."""
    return datetime.datetime.now(datetime.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass
class Record:
    """Represents a single named credential."""
    id: str
    name: str
    username: str
    password: str
    url: Optional[str] = None
    notes: Optional[str] = None
    updated_at: str = ""

    @classmethod
    def create(cls, name: str, username: str, password: str,
               url: Optional[str] = None, notes: Optional[str] = None) -> 'Record':
        """Build a new record with a fresh id and the current timestamp."""
        return cls(
            id=str(uuid.uuid4()),
            name=name,
            username=username,
            password=password,
            url=url,
            notes=notes,
            updated_at=now_iso(),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Any) -> 'Record':
        """
        Create from dictionary, checking every field's type.

        Unknown keys are ignored; missing optional fields become None.

        Raises:
            MalformedPayload: If a required field is missing or a field has
                the wrong type
        """
        if not isinstance(data, dict):
            raise MalformedPayload("record is not an object")
        values = {}
        for key in _REQUIRED_FIELDS:
            if not isinstance(data.get(key), str):
                raise MalformedPayload(f"record field {key!r} is missing or not a string")
            values[key] = data[key]
        for key in _OPTIONAL_FIELDS:
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise MalformedPayload(f"record field {key!r} is not a string or null")
            values[key] = value
        return cls(**values)


@dataclass
class Vault:
    """
    Ordered collection of records.

    Order is insertion/update order. upsert() keeps at most one record per
    name (exact, case-sensitive match).
    """
    entries: List[Record] = field(default_factory=list)

    def upsert(self, record: Record) -> None:
        """Remove any record with the same name, then append *record*."""
        before = len(self.entries)
        self.entries = [e for e in self.entries if e.name != record.name]
        if len(self.entries) < before:
            logger.debug(f"Replacing {before - len(self.entries)} existing record(s)")
        self.entries.append(record)

    def find(self, name: str) -> Record:
        """
        Return the first record whose name matches exactly.

        Raises:
            NotFound: If no record has that name
        """
        for entry in self.entries:
            if entry.name == name:
                return entry
        raise NotFound(name)

    def list(self) -> List[Record]:
        """Records in stored order."""
        return list(self.entries)

    def to_bytes(self) -> bytes:
        """Serialize to UTF-8 JSON."""
        data = {'entries': [e.to_dict() for e in self.entries]}
        return json.dumps(data).encode('utf-8')

    @classmethod
    def from_bytes(cls, payload: bytes) -> 'Vault':
        """
        Deserialize from UTF-8 JSON.

        Raises:
            MalformedPayload: If the payload is not valid UTF-8 JSON of the
                expected shape
        """
        try:
            data = json.loads(payload.decode('utf-8'))
        except (UnicodeDecodeError, ValueError) as e:
            raise MalformedPayload(f"vault payload is not valid JSON: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get('entries'), list):
            raise MalformedPayload("vault payload has no 'entries' list")
        return cls(entries=[Record.from_dict(e) for e in data['entries']])
