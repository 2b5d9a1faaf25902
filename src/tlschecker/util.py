import logging
import select
from time import monotonic
from ipaddress import ip_address
from datetime import datetime, timezone
from urllib.parse import urlparse
from typing import Union

import validators
from OpenSSL import SSL

from .exceptions import InvalidHostnameError, TransportError

__module__ = "tlschecker.util"

logger = logging.getLogger(__name__)


def force_str(s, encoding="utf-8", errors="strict") -> str:
    if issubclass(type(s), str):
        return s
    if isinstance(s, bytes):
        return str(s, encoding, errors)
    return str(s)


def is_ip_address(hostname: str) -> bool:
    try:
        ip_address(hostname)
    except ValueError:
        return False
    return True


def normalize_hostname(hostname: Union[str, None]) -> str:
    """
    Reduce user input such as `HTTPS://Example.com:8443/path` to `example.com`
    and reject anything that is not a domain name or IP literal
    """
    if hostname is None or not hostname.strip():
        raise InvalidHostnameError(hostname, "Domain is empty.")
    normalized = hostname.strip().lower()
    if not normalized.startswith("http://") and not normalized.startswith("https://"):
        normalized = f"https://{normalized}"
    try:
        parsed = urlparse(normalized)
        host = parsed.hostname
    except ValueError as err:
        raise InvalidHostnameError(hostname) from err
    if not host:
        raise InvalidHostnameError(hostname)
    if is_ip_address(host):
        return host
    if validators.domain(host) is not True:
        raise InvalidHostnameError(hostname)
    return host


def date_diff(comparer: datetime) -> str:
    if comparer.tzinfo is None:
        comparer = comparer.replace(tzinfo=timezone.utc)
    interval = comparer - datetime.now(timezone.utc)
    if interval.days < -1:
        return f"Expired {int(abs(interval.days))} days ago"
    if interval.days == -1:
        return "Expired yesterday"
    if interval.days == 0:
        return "Expires today"
    if interval.days == 1:
        return "Expires tomorrow"
    if interval.days > 365:
        return (
            f"Expires in {interval.days} days ({int(round(interval.days/365))} years)"
        )
    return f"Expires in {interval.days} days"


def remaining(deadline: float) -> float:
    return max(0.0, deadline - monotonic())


def do_handshake(conn: SSL.Connection, deadline: float) -> None:
    """
    Drive a handshake on a non-blocking socket until it completes or the
    monotonic `deadline` passes
    """
    while True:
        try:
            conn.do_handshake()
            return
        except SSL.WantReadError as err:
            readable, _, _ = select.select([conn], [], [], remaining(deadline))
            if not readable:
                raise TransportError("handshake timed out") from err
        except SSL.WantWriteError as err:
            _, writable, _ = select.select([], [conn], [], remaining(deadline))
            if not writable:
                raise TransportError("handshake timed out") from err


def describe_error(err: BaseException) -> str:
    """
    Human readable text for an exception, OpenSSL errors arrive as a list of
    (lib, func, reason) tuples
    """
    if isinstance(err, SSL.Error) and err.args and isinstance(err.args[0], list):
        reasons = [e[-1] for e in err.args[0] if isinstance(e, tuple) and e and e[-1]]
        if reasons:
            return ", ".join(reasons)
    if isinstance(err, SSL.SysCallError) and len(err.args) == 2:
        _, message = err.args
        return force_str(message) if message else type(err).__name__
    message = str(err).strip()
    if not message and isinstance(err, TimeoutError):
        return "timed out"
    return message or type(err).__name__
