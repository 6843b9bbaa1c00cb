"""Endpoint selection and client rebuilds."""

import pytest

from zuora.api import PRODUCTION_ENDPOINT, SANDBOX_ENDPOINT, ZuoraAPI, ZuoraConfig
from zuora.session import Session


@pytest.mark.parametrize(
    "cfg, expected",
    [
        (ZuoraConfig(sandbox=True), SANDBOX_ENDPOINT),
        (ZuoraConfig(sandbox=False), PRODUCTION_ENDPOINT),
        (ZuoraConfig(), PRODUCTION_ENDPOINT),
    ],
)
def test_configure_selects_endpoint(cfg, expected):
    api = ZuoraAPI(cfg)
    assert api.endpoint == expected


def test_client_is_cached():
    api = ZuoraAPI(ZuoraConfig())
    assert api.client is api.client
    assert api.service is api.service


def test_switching_environment_rebuilds_client():
    api = ZuoraAPI(ZuoraConfig(sandbox=True))
    first = api.client
    first_service = api.service

    api.production()

    assert api.endpoint == PRODUCTION_ENDPOINT
    assert api.client is not first
    assert api.service is not first_service
    assert api.service._binding_options["address"] == PRODUCTION_ENDPOINT

    api.sandbox()
    assert api.service._binding_options["address"] == SANDBOX_ENDPOINT


def test_switching_environment_keeps_credentials_and_drops_session():
    api = ZuoraAPI(ZuoraConfig(username="u", password="p"))
    api.session = Session(key="abc")

    api.sandbox()

    assert api.config.username == "u"
    assert api.config.password == "p"
    assert api.session is None
    assert api.is_authenticated() is False


def test_set_environment_rejects_unknown_name():
    api = ZuoraAPI(ZuoraConfig())
    with pytest.raises(ValueError, match="staging"):
        api.set_environment("staging")
    assert api.endpoint == PRODUCTION_ENDPOINT


def test_reconfigure_switches_endpoint():
    api = ZuoraAPI(ZuoraConfig(sandbox=False))
    api.configure(ZuoraConfig(sandbox=True))
    assert api.endpoint == SANDBOX_ENDPOINT


def test_wsdl_and_operations():
    api = ZuoraAPI(ZuoraConfig())

    assert api.wsdl is api.client.wsdl
    ops = api.operations()
    assert "login" in ops
    assert "query" in ops
    assert ops == sorted(ops)


def test_client_disables_certificate_verification_by_default():
    api = ZuoraAPI(ZuoraConfig())
    api.client
    assert api.http.verify is False


def test_client_can_verify_certificates():
    api = ZuoraAPI(ZuoraConfig(verify_ssl=True))
    api.client
    assert api.http.verify is True


def test_last_request_is_none_before_any_call():
    api = ZuoraAPI(ZuoraConfig())
    assert api.last_request is None
    api.client
    assert api.last_request is None
