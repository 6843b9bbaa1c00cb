from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("zuora-soap")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "unknown"

from .api import PRODUCTION_ENDPOINT, SANDBOX_ENDPOINT, ZuoraAPI, ZuoraConfig
from .exceptions import Fault, MissingCredentialsError
from .session import Session

__all__ = [
    "PRODUCTION_ENDPOINT",
    "SANDBOX_ENDPOINT",
    "Fault",
    "MissingCredentialsError",
    "Session",
    "ZuoraAPI",
    "ZuoraConfig",
    "configure",
    "__version__",
]


def configure(**options) -> None:
    """Configure the process-wide default client.

    Must be done before ``ZuoraAPI.instance()`` is used for calls.

    Example::

        zuora.configure(username="USERNAME", password="PASSWORD", sandbox=True)
    """
    ZuoraAPI.instance().configure(ZuoraConfig(**options))
