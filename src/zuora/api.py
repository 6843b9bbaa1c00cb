from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

import requests
import urllib3
import zeep
from lxml import etree
from lxml.builder import ElementMaker
from zeep.exceptions import Fault as SOAPFault
from zeep.exceptions import TransportError
from zeep.proxy import ServiceProxy

from .env_loader import load_env_files
from .exceptions import Fault, MissingCredentialsError
from .logging_config import configure_soap_logging, install_password_filter
from .session import Session
from .transport import ZuoraTransport

_logger = logging.getLogger(__name__)

# Ensure .env is loaded for library use as well (e.g., scripts importing ZuoraAPI)
load_env_files(quiet=True)

WSDL = str(Path(__file__).resolve().parent / "wsdl" / "zuora.a.57.0.wsdl")
SOAP_VERSION = 2
SANDBOX_ENDPOINT = "https://apisandbox.zuora.com/apps/services/a/57.0"
PRODUCTION_ENDPOINT = "https://www.zuora.com/apps/services/a/57.0"

ENDPOINTS = {
    "sandbox": SANDBOX_ENDPOINT,
    "production": PRODUCTION_ENDPOINT,
}

API_NS = "http://api.zuora.com/"
OBJECT_NS = "http://object.api.zuora.com/"

_BINDINGS = {
    1: f"{{{API_NS}}}SoapBinding",
    2: f"{{{API_NS}}}Soap12Binding",
}
_ENVELOPE_NS = {
    1: "http://schemas.xmlsoap.org/soap/envelope/",
    2: "http://www.w3.org/2003/05/soap-envelope",
}

# Errors that are reported to callers as a Fault. requests' exceptions derive
# from OSError, so connection problems are covered too.
_FAULT_ERRORS = (SOAPFault, TransportError, OSError)

BodyBuilder = Callable[[ElementMaker], Union[etree._Element, Iterable[etree._Element], str, None]]


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _as_fault(exc: Exception) -> Fault:
    message = getattr(exc, "message", None) or str(exc)
    return Fault(message, code=getattr(exc, "code", None))


# ----------------------------------------------------------------------
# Configuration dataclass
# ----------------------------------------------------------------------
@dataclass
class ZuoraConfig:
    """Credentials, environment and transport settings for the Zuora API."""

    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)

    # Talk to apisandbox.zuora.com instead of production
    sandbox: bool = False

    # SOAP traffic logging; `logger` receives it when given
    logger: Optional[logging.Logger] = None
    log: bool = False

    # Passed through to the transport
    verify_ssl: bool = False
    timeout: int = 300
    operation_timeout: Optional[float] = None

    wsdl: str = WSDL

    @classmethod
    def from_env(cls) -> ZuoraConfig:
        """Load configuration from environment variables."""
        timeout = os.getenv("ZUORA_TIMEOUT")
        try:
            operation_timeout = float(timeout) if timeout else None
        except ValueError:
            raise ValueError(f"ZUORA_TIMEOUT must be a number of seconds, got {timeout!r}") from None
        return cls(
            username=os.getenv("ZUORA_USERNAME"),
            password=os.getenv("ZUORA_PASSWORD"),
            sandbox=_env_flag("ZUORA_SANDBOX"),
            log=_env_flag("ZUORA_LOG"),
            verify_ssl=_env_flag("ZUORA_VERIFY_SSL"),
            operation_timeout=operation_timeout,
            wsdl=os.getenv("ZUORA_WSDL") or WSDL,
        )


# ----------------------------------------------------------------------
# Main API client
# ----------------------------------------------------------------------
class ZuoraAPI:
    """Authenticated access to the Zuora SOAP API.

    An instance owns its config, session and SOAP client and takes no locks:
    use one instance per thread, or guard a shared one yourself.
    """

    _instance: Optional[ZuoraAPI] = None

    def __init__(self, cfg: Optional[ZuoraConfig] = None) -> None:
        self.http = requests.Session()
        self.session: Optional[Session] = None
        self.endpoint = PRODUCTION_ENDPOINT
        self._client: Optional[zeep.Client] = None
        self._service: Optional[ServiceProxy] = None
        self.configure(cfg or ZuoraConfig.from_env())

    @classmethod
    def instance(cls) -> ZuoraAPI:
        """Return the process-wide default instance, creating it unconfigured."""
        if cls._instance is None:
            cls._instance = cls(ZuoraConfig())
        return cls._instance

    # --------------------------- Configuration ------------------------

    def configure(self, cfg: ZuoraConfig) -> None:
        """Apply a new configuration and select its environment."""
        configure_soap_logging(log=cfg.log, logger=cfg.logger)
        self.config = cfg
        if cfg.sandbox:
            self.sandbox()
        else:
            self.production()

    def set_environment(self, environment: str) -> None:
        """Point the client at ``sandbox`` or ``production``.

        The cached client is discarded so the next call is bound to the new
        endpoint. The session goes with it: keys are only valid on the
        environment that issued them.
        """
        try:
            endpoint = ENDPOINTS[environment]
        except KeyError:
            raise ValueError(
                f"Unknown Zuora environment {environment!r}; expected one of {sorted(ENDPOINTS)}"
            ) from None

        self._client = None
        self._service = None
        self.session = None
        self.endpoint = endpoint
        _logger.debug("Zuora endpoint set to %s (%s)", endpoint, environment)

    def sandbox(self) -> None:
        self.set_environment("sandbox")

    def production(self) -> None:
        self.set_environment("production")

    # --------------------------- Client ------------------------------

    @property
    def client(self) -> zeep.Client:
        if self._client is None:
            self._client = self._make_client()
        return self._client

    @property
    def service(self) -> ServiceProxy:
        """Operation proxy bound to the current endpoint."""
        if self._service is None:
            self._service = self.client.create_service(_BINDINGS[SOAP_VERSION], self.endpoint)
        return self._service

    @property
    def wsdl(self):
        """The parsed WSDL document backing the client."""
        return self.client.wsdl

    def operations(self) -> List[str]:
        """Names of the operations the WSDL offers on the active binding."""
        binding = self.client.wsdl.bindings[_BINDINGS[SOAP_VERSION]]
        return sorted(binding.all())

    @property
    def last_request(self) -> Optional[str]:
        """The XML that was transmitted in the last request."""
        if self._client is None:
            return None
        body = self._client.transport.last_request
        if body is None:
            return None
        return body.decode("utf-8") if isinstance(body, bytes) else body

    # --------------------------- Authentication ----------------------

    def is_authenticated(self) -> bool:
        return bool(self.session and self.session.active)

    def authenticate(self) -> Session:
        """Log in and attach the session key to every later call.

        Zuora insists on ``username`` preceding ``password`` in the login
        body; the WSDL sequence fixes that order on the wire.
        """
        missing = [
            k
            for k, v in {
                "ZUORA_USERNAME": self.config.username,
                "ZUORA_PASSWORD": self.config.password,
            }.items()
            if not v
        ]
        if missing:
            raise MissingCredentialsError(missing)

        # A failed login leaves the instance unauthenticated, whatever came before.
        self._drop_session()

        _logger.info("Logging in to Zuora at %s as %s", self.endpoint, self.config.username)
        try:
            response = self.service.login(
                username=self.config.username,
                password=self.config.password,
            )
        except _FAULT_ERRORS as e:
            _logger.warning("Zuora login failed: %s", e)
            raise _as_fault(e) from e

        session = Session.generate(response)
        if not session.active:
            _logger.warning("Zuora login at %s returned no session key", self.endpoint)
            raise Fault("login returned no session")

        self.session = session
        self.client.set_default_soapheaders([self._session_header(session.key)])
        _logger.debug("Zuora session established (server_url=%s)", self.session.server_url)
        return self.session

    # --------------------------- Requests ----------------------------

    def request(
        self,
        method: str,
        options: Optional[Dict[str, Any]] = None,
        body: Optional[BodyBuilder] = None,
    ) -> Any:
        """Call a WSDL operation, logging in first when there is no session.

        ``options`` are passed to the operation as keyword arguments. When
        ``body`` is given it is called with an lxml ``ElementMaker`` in the
        API namespace and whatever it returns (element, elements or an XML
        fragment string) is sent verbatim as the operation's content instead.
        """
        try:
            if not self.is_authenticated():
                self.authenticate()
            if body is not None:
                return self._send_literal(method, body)
            return self.service[method](**(options or {}))
        except _FAULT_ERRORS as e:
            _logger.debug("Zuora %s failed: %s", method, e)
            raise _as_fault(e) from e

    # --------------------------- Internal helpers --------------------

    def _drop_session(self) -> None:
        self.session = None
        if self._client is not None:
            self._client.set_default_soapheaders([])

    def _make_client(self) -> zeep.Client:
        install_password_filter()
        self.http.verify = self.config.verify_ssl
        if not self.config.verify_ssl:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

        transport = ZuoraTransport(
            session=self.http,
            timeout=self.config.timeout,
            operation_timeout=self.config.operation_timeout,
        )
        settings = zeep.Settings(strict=False, xml_huge_tree=True)
        _logger.debug("Building SOAP client for %s from %s", self.endpoint, self.config.wsdl)
        return zeep.Client(wsdl=self.config.wsdl, transport=transport, settings=settings)

    @staticmethod
    def _session_header(key: Optional[str]) -> etree._Element:
        E = ElementMaker(namespace=API_NS, nsmap={"ns1": API_NS})
        return E.SessionHeader(E.Session(key or ""))

    def _send_literal(self, method: str, body: BodyBuilder) -> Any:
        binding = self.client.wsdl.bindings[_BINDINGS[SOAP_VERSION]]
        operation = binding.get(method)

        E = ElementMaker(namespace=API_NS, nsmap={"ns1": API_NS, "ns2": OBJECT_NS})
        content = self._literal_children(body(E))

        env_ns = _ENVELOPE_NS[SOAP_VERSION]
        soap = ElementMaker(namespace=env_ns, nsmap={"soap-env": env_ns})
        header = soap.Header()
        if self.session is not None:
            header.append(self._session_header(self.session.key))
        envelope = soap.Envelope(header, soap.Body(E(method, *content)))

        response = self.client.transport.post_xml(
            self.endpoint, envelope, self._http_headers(operation.soapaction)
        )
        return binding.process_reply(self.client, operation, response)

    @staticmethod
    def _literal_children(built: Any) -> List[etree._Element]:
        if built is None:
            return []
        if isinstance(built, str):
            wrapper = etree.fromstring(
                f'<wrapper xmlns:ns1="{API_NS}" xmlns:ns2="{OBJECT_NS}">{built}</wrapper>'
            )
            if wrapper.text and wrapper.text.strip():
                raise ValueError(
                    f"Body fragment must start with an element, got text {wrapper.text.strip()!r}"
                )
            return list(wrapper)
        if isinstance(built, etree._Element):
            return [built]
        return list(built)

    @staticmethod
    def _http_headers(soapaction: Optional[str]) -> Dict[str, str]:
        action = soapaction or ""
        if SOAP_VERSION == 2:
            return {"Content-Type": f'application/soap+xml; charset=utf-8; action="{action}"'}
        return {"Content-Type": "text/xml; charset=utf-8", "SOAPAction": f'"{action}"'}
