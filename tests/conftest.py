import logging

import pytest
import requests

from zuora.api import SANDBOX_ENDPOINT, ZuoraAPI, ZuoraConfig
from zuora.logging_config import SOAP_LOGGER

SOAP12_ENV = "http://www.w3.org/2003/05/soap-envelope"
API_NS = "http://api.zuora.com/"
OBJECT_NS = "http://object.api.zuora.com/"

_ZUORA_ENV = (
    "ZUORA_USERNAME",
    "ZUORA_PASSWORD",
    "ZUORA_SANDBOX",
    "ZUORA_LOG",
    "ZUORA_VERIFY_SSL",
    "ZUORA_TIMEOUT",
    "ZUORA_WSDL",
    "ZUORA_ENV_FILE",
)


@pytest.fixture(autouse=True)
def clean_zuora_state(monkeypatch):
    """
    Every test starts without ZUORA_* env vars, without a default instance
    and with the zeep transport logger in its stock state.
    """
    for name in _ZUORA_ENV:
        monkeypatch.delenv(name, raising=False)
    ZuoraAPI._instance = None

    yield

    ZuoraAPI._instance = None
    soap_logger = logging.getLogger(SOAP_LOGGER)
    for handler in list(soap_logger.handlers):
        soap_logger.removeHandler(handler)
    soap_logger.propagate = True
    soap_logger.setLevel(logging.NOTSET)


class CannedSoap:
    """Builds SOAP 1.2 responses the way Zuora sends them."""

    @staticmethod
    def envelope(body: str) -> str:
        return (
            '<?xml version="1.0" encoding="UTF-8"?>'
            f'<soap:Envelope xmlns:soap="{SOAP12_ENV}"><soap:Body>{body}</soap:Body></soap:Envelope>'
        )

    @staticmethod
    def response(xml: str, status: int = 200) -> requests.Response:
        r = requests.Response()
        r.status_code = status
        r._content = xml.encode("utf-8")
        r.headers["Content-Type"] = "application/soap+xml; charset=utf-8"
        r.encoding = "utf-8"
        return r

    def login(self, key: str = "SESSION-KEY-123", server_url: str = SANDBOX_ENDPOINT):
        return self.response(
            self.envelope(
                f'<ns1:loginResponse xmlns:ns1="{API_NS}"><ns1:result>'
                f"<ns1:Session>{key}</ns1:Session>"
                f"<ns1:ServerUrl>{server_url}</ns1:ServerUrl>"
                "</ns1:result></ns1:loginResponse>"
            )
        )

    def query(self, name: str = "Acme"):
        return self.response(
            self.envelope(
                f'<ns1:queryResponse xmlns:ns1="{API_NS}" xmlns:ns2="{OBJECT_NS}" '
                'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"><ns1:result>'
                "<ns1:done>true</ns1:done>"
                '<ns1:records xsi:type="ns2:Account">'
                "<ns2:Id>2c92c0f84a1b2c3d</ns2:Id>"
                f"<ns2:Name>{name}</ns2:Name>"
                "</ns1:records>"
                "<ns1:size>1</ns1:size>"
                "</ns1:result></ns1:queryResponse>"
            )
        )

    def user_info(self):
        return self.response(
            self.envelope(
                f'<ns1:getUserInfoResponse xmlns:ns1="{API_NS}">'
                "<ns1:TenantId>12345</ns1:TenantId>"
                "<ns1:TenantName>Acme Test Tenant</ns1:TenantName>"
                "<ns1:Username>u</ns1:Username>"
                "</ns1:getUserInfoResponse>"
            )
        )

    def fault(self, message: str, code: str = "soap:Sender", status: int = 500):
        return self.response(
            self.envelope(
                "<soap:Fault>"
                f"<soap:Code><soap:Value>{code}</soap:Value></soap:Code>"
                f'<soap:Reason><soap:Text xml:lang="en">{message}</soap:Text></soap:Reason>'
                "</soap:Fault>"
            ),
            status=status,
        )


@pytest.fixture
def soap():
    return CannedSoap()


@pytest.fixture
def sandbox_api():
    """An API instance with credentials, pointed at the sandbox."""
    return ZuoraAPI(ZuoraConfig(username="u", password="p", sandbox=True))
