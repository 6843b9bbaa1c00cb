from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from zeep.helpers import serialize_object


@dataclass
class Session:
    """Session key handed out by a successful ``login`` call."""

    key: Optional[str] = field(default=None, repr=False)
    server_url: Optional[str] = None

    @property
    def active(self) -> bool:
        return bool(self.key)

    @classmethod
    def generate(cls, response: Any) -> Session:
        """Build a session from a login result.

        Accepts the zeep ``LoginResult`` object or its dict form, optionally
        still wrapped in a ``result`` key.
        """
        data = serialize_object(response, dict) if response is not None else {}
        if not isinstance(data, dict):
            return cls()
        if isinstance(data.get("result"), dict):
            data = data["result"]

        fields = {str(k).lower(): v for k, v in data.items()}
        return cls(key=fields.get("session"), server_url=fields.get("serverurl"))
