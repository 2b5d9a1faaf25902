__module__ = "tlschecker.exceptions"


class TLSCheckerError(Exception):
    """Base for errors raised by tlschecker"""


class TransportError(TLSCheckerError, ConnectionError):
    """Used when a connection or handshake could not be completed, never leaves the prober"""


class CertificateExtractionError(TLSCheckerError, ValueError):
    """A peer certificate field could not be read"""


class ConfigurationError(TLSCheckerError, ValueError):
    pass


class InvalidHostnameError(TLSCheckerError, ValueError):
    def __init__(self, hostname: str, message: str = None):
        if message is None:
            message = f"Invalid domain: {hostname}"
        super().__init__(message)
        self.hostname = hostname
