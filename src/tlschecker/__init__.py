import sys
import logging
from multiprocessing.pool import ThreadPool
from typing import Union

from . import constants
from .config import get_config
from .models import CertificateInfo, ProbeReport, ProbeResult, ProtocolVersion
from .transport import TLSTransport, probe
from .certificate import extract_certificate_info

__module__ = "tlschecker"
__version__ = "1.0.0"

assert sys.version_info >= (3, 9), "Requires Python 3.9 or newer"
logger = logging.getLogger(__name__)


class TLSChecker:
    config: dict = None

    def __init__(self, config: dict = None) -> None:
        self.config = config or get_config()

    @property
    def versions(self) -> list[ProtocolVersion]:
        return [ProtocolVersion(v) for v in self.config["defaults"]["versions"]]

    def transport(self, hostname: str, port: int = None) -> TLSTransport:
        return TLSTransport(
            hostname,
            port=port or self.config["defaults"]["port"],
            timeout=self.config["defaults"]["timeout"],
            use_sni=self.config["defaults"]["use_sni"],
        )

    def check_host(self, hostname: str, port: int = None) -> ProbeReport:
        """
        Probe every configured protocol version of `hostname` independently.

        The report has one entry per version in ProtocolVersion order, an
        unreachable host yields one failed entry per version.
        """
        transport = self.transport(hostname, port)
        versions = self.versions
        logger.info(
            f"{transport.hostname}:{transport.port} Probing {', '.join(v.label for v in versions)}"
        )
        if self.config["defaults"].get("parallel_probes") and len(versions) > 1:
            with ThreadPool(processes=len(versions)) as pool:
                results = pool.map(transport.probe, versions)
        else:
            results = [transport.probe(version) for version in versions]

        return ProbeReport(transport.hostname, results, port=transport.port)


def check_host(
    hostname: str,
    port: int = constants.DEFAULT_PORT,
    timeout: Union[int, float] = constants.DEFAULT_TIMEOUT,
    use_sni: bool = True,
    parallel_probes: bool = False,
) -> ProbeReport:
    config = get_config(
        custom_values={
            "defaults": {
                "port": port,
                "timeout": timeout,
                "use_sni": use_sni,
                "parallel_probes": parallel_probes,
                "versions": [v.value for v in ProtocolVersion],
            }
        }
    )
    return TLSChecker(config=config).check_host(hostname)


__all__ = [
    "TLSChecker",
    "TLSTransport",
    "CertificateInfo",
    "ProbeReport",
    "ProbeResult",
    "ProtocolVersion",
    "check_host",
    "extract_certificate_info",
    "probe",
]
