import pytest
from tlschecker import exceptions


def test_invalid_hostname():
    with pytest.raises(exceptions.InvalidHostnameError) as err:
        raise exceptions.InvalidHostnameError("not a domain")
    assert err.value.hostname == "not a domain"
    assert str(err.value) == "Invalid domain: not a domain"


def test_invalid_hostname_message():
    err = exceptions.InvalidHostnameError("", "Domain is empty.")
    assert str(err) == "Domain is empty."
    assert isinstance(err, ValueError)


def test_hierarchy():
    for exc in [
        exceptions.TransportError,
        exceptions.CertificateExtractionError,
        exceptions.ConfigurationError,
        exceptions.InvalidHostnameError,
    ]:
        assert issubclass(exc, exceptions.TLSCheckerError)
    assert issubclass(exceptions.TransportError, ConnectionError)
    assert issubclass(exceptions.ConfigurationError, ValueError)
