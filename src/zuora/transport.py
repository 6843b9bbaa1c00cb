from __future__ import annotations

import logging
from typing import Optional

from zeep.transports import Transport

_logger = logging.getLogger(__name__)


class ZuoraTransport(Transport):
    """zeep transport that keeps the body of the last POST for inspection."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.last_request: Optional[bytes] = None

    def post(self, address, message, headers):
        self.last_request = message
        _logger.debug("POST %s (%d bytes)", address, len(message or b""))
        return super().post(address, message, headers)
