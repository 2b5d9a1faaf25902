import socket
import ssl
import threading
from datetime import datetime, timedelta, timezone

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID


def make_certificate(
    tmp_path, common_name: str = "localhost", expired: bool = False
) -> tuple[x509.Certificate, str, str]:
    key = ec.generate_private_key(ec.SECP256R1())
    now = datetime.now(timezone.utc)
    if expired:
        not_before, not_after = now - timedelta(days=60), now - timedelta(days=30)
    else:
        not_before, not_after = now - timedelta(days=1), now + timedelta(days=30)
    name = x509.Name(
        [
            x509.NameAttribute(NameOID.COMMON_NAME, common_name),
            x509.NameAttribute(NameOID.ORGANIZATION_NAME, "tlschecker tests"),
        ]
    )
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before)
        .not_valid_after(not_after)
        .add_extension(
            x509.SubjectAlternativeName([x509.DNSName(common_name)]), critical=False
        )
        .sign(key, hashes.SHA256())
    )
    cert_path = tmp_path / f"{common_name}-{'expired' if expired else 'valid'}.pem"
    key_path = tmp_path / f"{common_name}-{'expired' if expired else 'valid'}.key"
    cert_path.write_bytes(cert.public_bytes(serialization.Encoding.PEM))
    key_path.write_bytes(
        key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
    )
    return cert, str(cert_path), str(key_path)


class LocalTLSServer(threading.Thread):
    """Serves TLS handshakes on 127.0.0.1, one connection at a time"""

    def __init__(
        self,
        cert_path: str,
        key_path: str,
        minimum_version: ssl.TLSVersion = ssl.TLSVersion.TLSv1_2,
        maximum_version: ssl.TLSVersion = ssl.TLSVersion.TLSv1_3,
        ciphers: str = None,
    ) -> None:
        super().__init__(daemon=True)
        self.context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
        if ciphers is not None:
            # lowers the security level first so legacy versions can be enabled
            self.context.set_ciphers(ciphers)
        self.context.minimum_version = minimum_version
        self.context.maximum_version = maximum_version
        self.context.load_cert_chain(cert_path, key_path)
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.sock.bind(("127.0.0.1", 0))
        self.sock.listen(8)
        self.sock.settimeout(0.2)
        self.port = self.sock.getsockname()[1]
        self.handshakes = 0
        self._stopped = threading.Event()

    def run(self) -> None:
        while not self._stopped.is_set():
            try:
                conn, _ = self.sock.accept()
            except socket.timeout:
                continue
            except OSError:
                return
            conn.settimeout(5)
            try:
                with self.context.wrap_socket(conn, server_side=True) as tls:
                    self.handshakes += 1
                    tls.recv(1)
            except (ssl.SSLError, OSError):
                pass
            finally:
                conn.close()

    def stop(self) -> None:
        self._stopped.set()
        self.join(timeout=5)
        self.sock.close()


@pytest.fixture
def certificate(tmp_path):
    return make_certificate(tmp_path)


@pytest.fixture
def expired_certificate(tmp_path):
    return make_certificate(tmp_path, expired=True)


@pytest.fixture
def tls_server(certificate):
    _, cert_path, key_path = certificate
    server = LocalTLSServer(cert_path, key_path)
    server.start()
    yield server
    server.stop()


@pytest.fixture
def expired_tls_server(expired_certificate):
    _, cert_path, key_path = expired_certificate
    server = LocalTLSServer(cert_path, key_path)
    server.start()
    yield server
    server.stop()


@pytest.fixture
def legacy_tls_server(certificate):
    """Speaks only TLS 1.0 and TLS 1.1"""
    _, cert_path, key_path = certificate
    server = LocalTLSServer(
        cert_path,
        key_path,
        minimum_version=ssl.TLSVersion.TLSv1,
        maximum_version=ssl.TLSVersion.TLSv1_1,
        ciphers="ALL:@SECLEVEL=0",
    )
    server.start()
    yield server
    server.stop()


@pytest.fixture
def silent_server():
    """Accepts TCP connections through the backlog but never answers a ClientHello"""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    sock.listen(8)
    yield sock.getsockname()[1]
    sock.close()


@pytest.fixture
def closed_port():
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port
