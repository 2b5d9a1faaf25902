import logging

from OpenSSL import SSL
from OpenSSL.crypto import X509

__module__ = "tlschecker.transport.trust"

logger = logging.getLogger(__name__)


class PermissiveTrustPolicy:
    """
    Accepts every certificate chain so a handshake completes against
    self-signed, expired or otherwise untrusted servers.

    Discovery only, never attach this to a connection whose outcome informs a
    trust decision.
    """

    @property
    def accepted_issuers(self) -> list[X509]:
        return []

    def check_client_trusted(self, chain: list, auth_type: str = None) -> None:
        return None

    def check_server_trusted(self, chain: list, auth_type: str = None) -> None:
        return None

    def verify(
        self,
        conn: SSL.Connection,
        cert: X509,
        errno: int,
        depth: int,
        preverify_ok: int,
    ) -> bool:
        # preverify_ok is 0 when OpenSSL itself rejected the certificate at this depth
        if not preverify_ok:
            logger.debug(f"ignoring verify error {errno} at depth {depth}")
        return True

    def attach(self, context: SSL.Context) -> SSL.Context:
        context.set_verify(SSL.VERIFY_PEER, self.verify)
        return context
