from __future__ import annotations

import logging
import re
from typing import Optional

_DEFAULT_FMT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DEFAULT_DATEFMT = "%H:%M:%S"

# zeep writes every envelope it sends and receives to this logger at DEBUG.
SOAP_LOGGER = "zeep.transports"
REDACTED = "***FILTERED***"

_PASSWORD_RE = re.compile(
    r"(<(?:[\w.-]+:)?password\b[^>]*>)(.*?)(</(?:[\w.-]+:)?password\s*>)",
    re.IGNORECASE | re.DOTALL,
)


def redact_password(text: str) -> str:
    """Blank out the content of every ``password`` element in ``text``."""
    return _PASSWORD_RE.sub(lambda m: m.group(1) + REDACTED + m.group(3), text)


class PasswordFilter(logging.Filter):
    """Rewrites records so that login passwords never reach a handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        if "assword" in message:
            record.msg = redact_password(message)
            record.args = ()
        return True


class _ForwardingHandler(logging.Handler):
    """Hands SOAP traffic records to a caller-supplied logger."""

    def __init__(self, target: logging.Logger):
        super().__init__()
        self.target = target

    def emit(self, record: logging.LogRecord) -> None:
        self.target.handle(record)


def install_password_filter() -> None:
    soap_logger = logging.getLogger(SOAP_LOGGER)
    if not any(isinstance(f, PasswordFilter) for f in soap_logger.filters):
        soap_logger.addFilter(PasswordFilter())


def configure_soap_logging(log: bool = False, logger: Optional[logging.Logger] = None) -> None:
    """Switch SOAP traffic logging on or off.

    With ``log`` off only warnings from the transport get through. With it on,
    request and response envelopes are logged at DEBUG, either to ``logger``
    or through the normal logging hierarchy when no logger is given.
    """
    install_password_filter()
    soap_logger = logging.getLogger(SOAP_LOGGER)

    for handler in [h for h in soap_logger.handlers if isinstance(h, _ForwardingHandler)]:
        soap_logger.removeHandler(handler)
    soap_logger.propagate = True

    if not log:
        soap_logger.setLevel(logging.WARNING)
        return

    soap_logger.setLevel(logging.DEBUG)
    if logger is not None:
        soap_logger.addHandler(_ForwardingHandler(logger))
        soap_logger.propagate = False


# Floors for libraries that drown out -vv: zeep dumps the whole WSDL schema
# walk at DEBUG, urllib3 warns about Zuora's response headers.
QUIET_LOGGERS = {
    "zeep.xsd.schema": logging.INFO,
    "zeep.wsdl.wsdl": logging.INFO,
    "urllib3.connection": logging.ERROR,
}


def configure_logging(level: Optional[int]) -> None:
    """Set up console logging for the CLI; repeated calls only change the level.

    SOAP envelopes are governed separately by :func:`configure_soap_logging`.
    """
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=_DEFAULT_FMT, datefmt=_DEFAULT_DATEFMT)
    root.setLevel(logging.WARNING if level is None else level)

    for name, floor in QUIET_LOGGERS.items():
        noisy = logging.getLogger(name)
        if noisy.level < floor:
            noisy.setLevel(floor)

    install_password_filter()
