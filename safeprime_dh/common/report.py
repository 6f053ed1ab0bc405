"""
Pydantic model for the outcome of one key-exchange run.

Big integers are kept as ints (JSON numbers of arbitrary size); derived
keys are lowercase hex strings.
"""

from __future__ import annotations

import json
import re

from pydantic import BaseModel, field_validator


HEX_RE = re.compile(r"^[0-9a-f]+$")


class PartyReport(BaseModel):
    name: str
    private_key: int
    public_key: int
    shared_secret: int
    encryption_key: str
    authentication_key: str

    @field_validator("encryption_key", "authentication_key")
    @classmethod
    def _validate_hex(cls, v: str) -> str:
        if not HEX_RE.match(v):
            raise ValueError("derived keys must be lowercase hex")
        return v


class ExchangeReport(BaseModel):
    bits: int
    p: int
    q: int
    g: int
    alice: PartyReport
    bob: PartyReport
    elapsed_ms: int = 0

    @property
    def secrets_match(self) -> bool:
        return self.alice.shared_secret == self.bob.shared_secret

    @property
    def encryption_keys_match(self) -> bool:
        return self.alice.encryption_key == self.bob.encryption_key

    @property
    def authentication_keys_match(self) -> bool:
        return self.alice.authentication_key == self.bob.authentication_key

    @property
    def all_match(self) -> bool:
        return (
            self.secrets_match
            and self.encryption_keys_match
            and self.authentication_keys_match
        )

    def to_json(self) -> str:
        data = self.model_dump()
        data.update(
            secrets_match=self.secrets_match,
            encryption_keys_match=self.encryption_keys_match,
            authentication_keys_match=self.authentication_keys_match,
            all_match=self.all_match,
        )
        return json.dumps(data, separators=(",", ":"))
