from enum import Enum
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Iterable, Iterator, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from . import constants, util

__module__ = "tlschecker.models"


class ProtocolVersion(str, Enum):
    TLS1_0 = "TLSv1"
    TLS1_1 = "TLSv1.1"
    TLS1_2 = "TLSv1.2"
    TLS1_3 = "TLSv1.3"

    @property
    def label(self) -> str:
        return constants.PROTOCOL_LABEL[self.value]

    @property
    def openssl_version(self) -> int:
        return constants.OPENSSL_VERSION_LOOKUP[self.value]

    @property
    def protocol_version(self) -> int:
        return constants.PROTOCOL_VERSION[self.value]

    @property
    def is_legacy(self) -> bool:
        return self.value in constants.WEAK_PROTOCOL

    @property
    def position(self) -> int:
        return list(ProtocolVersion).index(self)

    def __str__(self) -> str:
        return self.value


class CertificateInfo(BaseModel):
    """
    Identity and validity of a peer's leaf certificate.

    Either every identity/validity field is populated, or only
    `extraction_error` is, never a mix of both.
    """

    model_config = ConfigDict(frozen=True)

    subject: Union[str, None] = Field(
        default=None, description="RFC 4514 distinguished name of the subject"
    )
    issuer: Union[str, None] = Field(
        default=None, description="RFC 4514 distinguished name of the issuer"
    )
    valid_from: Union[datetime, None] = Field(default=None, description="notBefore")
    valid_to: Union[datetime, None] = Field(default=None, description="notAfter")
    signature_algorithm: Union[str, None] = Field(default=None)
    extraction_error: Union[str, None] = Field(default=None)

    @field_validator("valid_from", "valid_to")
    @classmethod
    def as_utc(cls, value: Union[datetime, None]) -> Union[datetime, None]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @model_validator(mode="after")
    def check_exclusive(self) -> "CertificateInfo":
        details = [
            self.subject,
            self.issuer,
            self.valid_from,
            self.valid_to,
            self.signature_algorithm,
        ]
        if self.extraction_error is not None:
            if any(value is not None for value in details):
                raise ValueError(
                    "extraction_error cannot be combined with certificate details"
                )
            return self
        if any(value is None for value in details):
            raise ValueError(
                "subject, issuer, valid_from, valid_to and signature_algorithm are all required without an extraction_error"
            )
        return self

    @classmethod
    def from_error(cls, message: str) -> "CertificateInfo":
        return cls(extraction_error=message)

    @property
    def extracted(self) -> bool:
        return self.extraction_error is None

    @property
    def expired(self) -> Union[bool, None]:
        if self.valid_to is None:
            return None
        return self.valid_to < datetime.now(timezone.utc)

    @property
    def expiry_status(self) -> Union[str, None]:
        if self.valid_to is None:
            return None
        return util.date_diff(self.valid_to)

    def to_dict(self) -> dict:
        if not self.extracted:
            return {"extraction_error": self.extraction_error}
        return {
            "subject": self.subject,
            "issuer": self.issuer,
            "valid_from": self.valid_from.isoformat(),
            "valid_to": self.valid_to.isoformat(),
            "signature_algorithm": self.signature_algorithm,
            "expired": self.expired,
        }


class ProbeResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    version: ProtocolVersion
    supported: bool = Field(default=False)
    negotiated_cipher_suites: tuple[str, ...] = Field(default=())
    negotiated_protocols: tuple[str, ...] = Field(default=())
    negotiated_cipher_bits: Union[int, None] = Field(default=None)
    certificate: Union[CertificateInfo, None] = Field(default=None)
    failure_reason: Union[str, None] = Field(default=None)
    peer_address: Union[str, None] = Field(default=None)
    duration: float = Field(default=0.0, ge=0, description="seconds")

    @model_validator(mode="after")
    def check_outcome(self) -> "ProbeResult":
        if self.supported:
            if self.failure_reason is not None:
                raise ValueError("a supported version cannot carry a failure_reason")
            return self
        if any(
            [
                self.negotiated_cipher_suites,
                self.negotiated_protocols,
                self.negotiated_cipher_bits is not None,
                self.certificate is not None,
            ]
        ):
            raise ValueError(
                "an unsupported version cannot carry negotiated or certificate details"
            )
        if not self.failure_reason:
            raise ValueError("an unsupported version requires a failure_reason")
        return self

    @classmethod
    def success(
        cls,
        version: ProtocolVersion,
        cipher_suites: Iterable[str],
        protocols: Iterable[str],
        certificate: Union[CertificateInfo, None] = None,
        **kwargs,
    ) -> "ProbeResult":
        return cls(
            version=version,
            supported=True,
            negotiated_cipher_suites=tuple(cipher_suites),
            negotiated_protocols=tuple(protocols),
            certificate=certificate,
            **kwargs,
        )

    @classmethod
    def failure(
        cls, version: ProtocolVersion, reason: str, **kwargs
    ) -> "ProbeResult":
        return cls(version=version, supported=False, failure_reason=reason, **kwargs)

    def to_dict(self) -> dict:
        return {
            "version": self.version.value,
            "label": self.version.label,
            "protocol_version": f"0x{self.version.protocol_version:04x}",
            "supported": self.supported,
            "cipher_suites": list(self.negotiated_cipher_suites),
            "cipher_bits": self.negotiated_cipher_bits,
            "protocols": list(self.negotiated_protocols),
            "certificate": self.certificate.to_dict() if self.certificate else None,
            "failure_reason": self.failure_reason,
            "peer_address": self.peer_address,
            "duration": round(self.duration, 3),
        }


class ProbeReport(Mapping):
    """
    Read-only mapping of ProtocolVersion to ProbeResult for one host,
    iterated in ProtocolVersion order whatever order results arrived in.
    """

    def __init__(
        self,
        hostname: str,
        results: Iterable[ProbeResult],
        port: int = constants.DEFAULT_PORT,
        date: datetime = None,
    ) -> None:
        self.hostname = hostname
        self.port = port
        self.date = date or datetime.now(timezone.utc).replace(microsecond=0)
        ordered = {}
        for result in sorted(results, key=lambda r: r.version.position):
            if result.version in ordered:
                raise ValueError(f"duplicate result for {result.version}")
            ordered[result.version] = result
        self._results: dict[ProtocolVersion, ProbeResult] = ordered

    def __getitem__(self, key: Union[ProtocolVersion, str]) -> ProbeResult:
        try:
            return self._results[ProtocolVersion(key)]
        except ValueError as err:
            raise KeyError(key) from err

    def __iter__(self) -> Iterator[ProtocolVersion]:
        return iter(self._results)

    def __len__(self) -> int:
        return len(self._results)

    def __repr__(self) -> str:
        supported = ", ".join(str(v) for v in self.supported_versions) or "none"
        return f"<ProbeReport {self.hostname}:{self.port} supported={supported}>"

    @property
    def supported_versions(self) -> list[ProtocolVersion]:
        return [version for version, result in self.items() if result.supported]

    @property
    def legacy_supported(self) -> bool:
        return any(version.is_legacy for version in self.supported_versions)

    def to_dict(self) -> dict:
        return {
            "hostname": self.hostname,
            "port": self.port,
            "date": self.date.isoformat(),
            "supported_versions": [v.value for v in self.supported_versions],
            "legacy_supported": self.legacy_supported,
            "results": [result.to_dict() for result in self.values()],
        }
