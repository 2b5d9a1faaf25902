import logging
import socket
from time import monotonic
from typing import Union

import idna
from OpenSSL import SSL, _util

from .. import constants, util
from ..certificate import extract_certificate_info
from ..exceptions import TransportError
from ..models import ProbeResult, ProtocolVersion
from .trust import PermissiveTrustPolicy

__module__ = "tlschecker.transport"

logger = logging.getLogger(__name__)
# routine refusals when a server does not speak the forced version
EXPECTED_NEGOTIATION_ERRORS = [
    "no protocols available",
    "alert protocol",
    "unsupported protocol",
    "wrong version number",
    "handshake failure",
    "shutdown while in init",
    "Connection refused",
    "timed out",
]


class TLSTransport:
    _default_connect_method: str = "TLS_CLIENT_METHOD"

    def __init__(
        self,
        hostname: str,
        port: int = constants.DEFAULT_PORT,
        timeout: Union[int, float] = constants.DEFAULT_TIMEOUT,
        use_sni: bool = True,
    ) -> None:
        if not isinstance(port, int):
            raise TypeError(
                f"provided an invalid type {type(port)} for port, expected int"
            )
        if not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ValueError(f"provided an invalid timeout {timeout}")
        self.hostname = hostname
        self.port = port
        self.timeout = timeout
        self.use_sni = use_sni
        self.trust_policy = PermissiveTrustPolicy()

    def prepare_socket(self, deadline: float) -> socket.socket:
        """
        Connect to each resolved address in turn, all attempts share the
        one `deadline` rather than a timeout each
        """
        last_err = None
        for family, socktype, proto, _, address in socket.getaddrinfo(
            self.hostname, self.port, type=socket.SOCK_STREAM
        ):
            timeout = util.remaining(deadline)
            if timeout <= 0:
                raise TransportError("timed out") from last_err
            sock = socket.socket(family, socktype, proto)
            try:
                sock.settimeout(timeout)
                sock.connect(address)
            except OSError as err:
                logger.debug(f"{self.hostname}:{self.port} {address} {err}")
                sock.close()
                last_err = err
                continue
            # handshake progress is driven by select against the deadline
            sock.setblocking(False)
            return sock
        if last_err is not None:
            raise last_err
        raise TransportError(f"no addresses resolved for {self.hostname}")

    def prepare_context(self, version: ProtocolVersion) -> SSL.Context:
        ctx = SSL.Context(method=getattr(SSL, TLSTransport._default_connect_method))
        ctx.set_min_proto_version(version.openssl_version)
        ctx.set_max_proto_version(version.openssl_version)
        ctx.set_cipher_list(constants.PROBE_CIPHER_LIST)
        ctx.set_options(
            _util.lib.SSL_OP_LEGACY_SERVER_CONNECT | _util.lib.SSL_OP_TLS_ROLLBACK_BUG
        )
        return self.trust_policy.attach(ctx)

    def prepare_connection(
        self, context: SSL.Context, sock: socket.socket
    ) -> SSL.Connection:
        conn = SSL.Connection(context, sock)
        if self.use_sni and not util.is_ip_address(self.hostname):
            conn.set_tlsext_host_name(idna.encode(self.hostname))
        conn.set_connect_state()
        return conn

    def probe(self, version: Union[ProtocolVersion, str]) -> ProbeResult:
        """
        Attempt one handshake restricted to exactly `version`.

        Always returns a ProbeResult, connection and handshake errors are
        reported in `failure_reason` rather than raised.
        """
        version = ProtocolVersion(version)
        logger.info(f"{self.hostname}:{self.port} Trying {version.label}")
        started = monotonic()
        deadline = started + self.timeout
        sock = None
        conn = None
        try:
            ctx = self.prepare_context(version)
            sock = self.prepare_socket(deadline)
            peer_address, *_ = sock.getpeername()
            conn = self.prepare_connection(ctx, sock)
            util.do_handshake(conn, deadline)
            result = self._negotiated(
                conn, version, peer_address, monotonic() - started
            )
            self._shutdown(conn)
            return result
        except (SSL.Error, TransportError, OSError, ValueError) as err:
            reason = util.describe_error(err)
            if any(x in reason for x in EXPECTED_NEGOTIATION_ERRORS):
                logger.debug(
                    f"{self.hostname}:{self.port} {version.label} not negotiated: {reason}"
                )
            else:
                logger.warning(err, exc_info=True)
            return ProbeResult.failure(
                version, reason, duration=monotonic() - started
            )
        except Exception as ex:  # pylint: disable=broad-except
            logger.warning(ex, exc_info=True)
            return ProbeResult.failure(
                version, util.describe_error(ex), duration=monotonic() - started
            )
        finally:
            if conn is not None:
                conn.close()
            if sock is not None:
                sock.close()

    def _negotiated(
        self,
        conn: SSL.Connection,
        version: ProtocolVersion,
        peer_address: str,
        duration: float,
    ) -> ProbeResult:
        cipher = conn.get_cipher_name()
        protocol = conn.get_protocol_version_name()
        logger.info(
            f"{self.hostname}:{self.port} Negotiated {protocol} {cipher} {peer_address}"
        )
        return ProbeResult.success(
            version,
            cipher_suites=[cipher] if cipher else [],
            protocols=[protocol] if protocol else [],
            certificate=extract_certificate_info(conn.get_peer_cert_chain()),
            negotiated_cipher_bits=conn.get_cipher_bits(),
            peer_address=peer_address,
            duration=duration,
        )

    def _shutdown(self, conn: SSL.Connection) -> None:
        try:
            conn.shutdown()
        except SSL.Error as err:
            # the peer may already be gone, the result is complete at this point
            logger.debug(f"{self.hostname}:{self.port} shutdown: {err}")


def probe(
    hostname: str,
    version: Union[ProtocolVersion, str],
    port: int = constants.DEFAULT_PORT,
    timeout: Union[int, float] = constants.DEFAULT_TIMEOUT,
    use_sni: bool = True,
) -> ProbeResult:
    return TLSTransport(
        hostname, port=port, timeout=timeout, use_sni=use_sni
    ).probe(version)
