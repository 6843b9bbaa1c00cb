from zuora.exceptions import Fault, MissingCredentialsError


def test_fault_keeps_message_and_code():
    err = Fault("INVALID_SESSION: session expired", code="soap:Sender")
    assert err.message == "INVALID_SESSION: session expired"
    assert err.code == "soap:Sender"
    assert str(err) == "INVALID_SESSION: session expired"
    assert isinstance(err, RuntimeError)


def test_missing_credentials_lists_names():
    err = MissingCredentialsError(["ZUORA_USERNAME", "ZUORA_PASSWORD"])
    assert err.missing == ["ZUORA_USERNAME", "ZUORA_PASSWORD"]
    assert "ZUORA_USERNAME, ZUORA_PASSWORD" in str(err)
