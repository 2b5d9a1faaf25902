import logging
from datetime import datetime
from typing import Sequence, Union

from cryptography.x509 import Certificate, load_pem_x509_certificate
from OpenSSL.crypto import X509

from .exceptions import CertificateExtractionError
from .models import CertificateInfo
from .util import describe_error

__module__ = "tlschecker.certificate"

logger = logging.getLogger(__name__)


class BaseCertificate:
    """
    What the extractor needs from a certificate, whatever library produced it
    """

    @property
    def subject(self) -> str:
        raise NotImplementedError

    @property
    def issuer(self) -> str:
        raise NotImplementedError

    @property
    def not_before(self) -> datetime:
        raise NotImplementedError

    @property
    def not_after(self) -> datetime:
        raise NotImplementedError

    @property
    def signature_algorithm(self) -> str:
        raise NotImplementedError


class LeafCertificate(BaseCertificate):
    def __init__(self, certificate: Union[X509, Certificate, bytes]) -> None:
        if isinstance(certificate, bytes):
            certificate = load_pem_x509_certificate(certificate)
        if isinstance(certificate, X509):
            certificate = certificate.to_cryptography()
        if not isinstance(certificate, Certificate):
            raise CertificateExtractionError(
                f"provided an invalid type {type(certificate)} for certificate"
            )
        self._certificate = certificate

    @property
    def subject(self) -> str:
        return self._certificate.subject.rfc4514_string()

    @property
    def issuer(self) -> str:
        return self._certificate.issuer.rfc4514_string()

    @property
    def not_before(self) -> datetime:
        return self._certificate.not_valid_before_utc

    @property
    def not_after(self) -> datetime:
        return self._certificate.not_valid_after_utc

    @property
    def signature_algorithm(self) -> str:
        oid = self._certificate.signature_algorithm_oid
        name = oid._name  # pylint: disable=protected-access
        if not name or name == "Unknown OID":
            return oid.dotted_string
        return name


def extract_certificate_info(
    chain: Union[Sequence[Union[X509, Certificate, BaseCertificate]], None]
) -> CertificateInfo:
    """
    Identity and validity of the leaf (first) certificate in a peer chain.

    Never raises; anything that goes wrong is reported in
    `CertificateInfo.extraction_error`.
    """
    try:
        if not chain:
            raise CertificateExtractionError("peer presented no certificate chain")
        leaf = chain[0]
        reader = leaf if isinstance(leaf, BaseCertificate) else LeafCertificate(leaf)
        return CertificateInfo(
            subject=reader.subject,
            issuer=reader.issuer,
            valid_from=reader.not_before,
            valid_to=reader.not_after,
            signature_algorithm=reader.signature_algorithm,
        )
    except Exception as ex:  # pylint: disable=broad-except
        logger.debug(ex, exc_info=True)
        return CertificateInfo.from_error(
            f"Unable to read certificate details: {describe_error(ex)}"
        )
