from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.style import Style
from rich.table import Table

from .. import constants
from ..models import ProbeReport, ProbeResult, ProtocolVersion

__module__ = "tlschecker.cli.outputs"


def truncate(text: str, max_length: int = constants.MAX_DISPLAY_TEXT) -> str:
    if text is None:
        return ""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def styled_cipher(cipher: str) -> str:
    for needles, color in constants.CIPHER_COLOR_MAP:
        if any(needle in cipher for needle in needles):
            return f"[{color}]{escape(cipher)}[/{color}]"
    return f"[white]{escape(cipher)}[/white]"


def styled_value(value: str, color: str = constants.CLI_COLOR_INFO) -> str:
    return f"[{color}]{escape(truncate(value))}[/{color}]"


def table_version(result: ProbeResult) -> Table:
    title_style = Style(
        bold=True,
        color=constants.CLI_COLOR_PASS if result.supported else constants.CLI_COLOR_FAIL,
    )
    table = Table(
        title=f"TLS Version: {result.version.value}",
        title_style=title_style,
        box=box.SIMPLE,
    )
    table.add_column("", justify="right", style="dark_turquoise", no_wrap=True)
    table.add_column("Result", justify="left", no_wrap=False)
    if result.supported:
        table.add_row(
            "Status",
            f"[bold][{constants.CLI_COLOR_PASS}]SUPPORTED[/{constants.CLI_COLOR_PASS}][/bold]",
        )
    else:
        table.add_row(
            "Status",
            f"[bold][{constants.CLI_COLOR_FAIL}]NOT SUPPORTED[/{constants.CLI_COLOR_FAIL}][/bold]",
        )
        table.add_row("Error", styled_value(result.failure_reason, constants.CLI_COLOR_WARN))
        return table

    ciphers = list(result.negotiated_cipher_suites)
    if ciphers:
        table.add_row(
            "Cipher Suites",
            f"[bold][{constants.CLI_COLOR_INFO}]({len(ciphers)} total)[/{constants.CLI_COLOR_INFO}][/bold]",
        )
        for cipher in ciphers[: constants.MAX_DISPLAY_CIPHERS]:
            table.add_row("", f"  • {styled_cipher(truncate(cipher))}")
        if len(ciphers) > constants.MAX_DISPLAY_CIPHERS:
            table.add_row("", f"  ... (total {len(ciphers)} suites)")
    if result.negotiated_cipher_bits:
        table.add_row("Cipher Bits", str(result.negotiated_cipher_bits))
    if result.negotiated_protocols:
        table.add_row("Protocols", ", ".join(result.negotiated_protocols))

    cert = result.certificate
    if cert is None:
        return table
    if not cert.extracted:
        table.add_row(
            "Certificate Error", styled_value(cert.extraction_error, constants.CLI_COLOR_FAIL)
        )
        return table
    table.add_row("Certificate Subject", escape(truncate(cert.subject)))
    table.add_row("Certificate Issuer", escape(truncate(cert.issuer)))
    table.add_row(
        "Valid Period",
        f"{cert.valid_from.strftime(constants.DISPLAY_DATE_FMT)} ~ {cert.valid_to.strftime(constants.DISPLAY_DATE_FMT)}",
    )
    table.add_row(
        "Expiry",
        styled_value(
            cert.expiry_status,
            constants.CLI_COLOR_FAIL if cert.expired else constants.CLI_COLOR_PASS,
        ),
    )
    table.add_row("Signature Algorithm", escape(truncate(cert.signature_algorithm)))
    return table


def table_summary(report: ProbeReport) -> Table:
    table = Table(box=box.SIMPLE_HEAD)
    table.add_column(
        "SUMMARY", justify="right", style="dark_turquoise", no_wrap=True
    )
    table.add_column("", justify="left", no_wrap=False)
    supported = report.supported_versions
    table.add_row("Supported TLS Versions", f"{len(supported)}/{len(report)}")
    if supported:
        table.add_row("Supported Versions", ", ".join(v.value for v in supported))
    table.add_row("", "")
    table.add_row(
        f"[bold][{constants.CLI_COLOR_WARN}]Security Recommendations[/{constants.CLI_COLOR_WARN}][/bold]",
        "",
    )
    recommendations = [
        (
            ProtocolVersion.TLS1_3,
            "SUPPORTED - Latest Security Standard",
            "NOT SUPPORTED - Security Upgrade Recommended",
        ),
        (
            ProtocolVersion.TLS1_2,
            "SUPPORTED - Secure Version",
            "NOT SUPPORTED - Security Risk",
        ),
    ]
    for version, good, bad in recommendations:
        if version in supported:
            table.add_row(
                version.label,
                f"[bold][{constants.CLI_COLOR_PASS}]{good}[/{constants.CLI_COLOR_PASS}][/bold]",
            )
        else:
            table.add_row(
                version.label,
                f"[bold][{constants.CLI_COLOR_FAIL}]{bad}[/{constants.CLI_COLOR_FAIL}][/bold]",
            )
    if report.legacy_supported:
        table.add_row(
            "Legacy TLS",
            f"[bold][{constants.CLI_COLOR_WARN}]WARNING - Potential Security Vulnerabilities[/{constants.CLI_COLOR_WARN}][/bold]",
        )
    return table


def print_report(report: ProbeReport, con: Console) -> None:
    con.print(
        Panel(
            f"[bold]TLS Support Status: {escape(report.hostname)}[/bold]",
            box=box.DOUBLE,
            expand=True,
        ),
        justify="center",
    )
    if not report.supported_versions:
        con.print(
            Panel(
                f"[bold][{constants.CLI_COLOR_FAIL}]NO TLS SUPPORT[/{constants.CLI_COLOR_FAIL}][/bold]\n"
                "No supported TLS versions found for this domain.\n"
                "Please check the domain name or network connection.",
                expand=True,
            )
        )
    for result in report.values():
        con.print(table_version(result))
    con.print(table_summary(report))


def print_usage(con: Console, timeout: int = constants.DEFAULT_TIMEOUT) -> None:
    con.print(
        Panel(
            "Enter a domain to check TLS support status.\n\n"
            f"[bold][{constants.CLI_COLOR_PASS}]Examples:[/{constants.CLI_COLOR_PASS}][/bold]\n"
            "  tlschecker google.com\n"
            "  tlschecker github.com\n\n"
            f"[bold][{constants.CLI_COLOR_WARN}]Notes:[/{constants.CLI_COLOR_WARN}][/bold]\n"
            "  • Enter domain name only (without https://)\n"
            "  • Connects to port 443 (HTTPS) unless --port is given\n"
            f"  • Connection timeout: {timeout} seconds",
            title=f"[bold][{constants.CLI_COLOR_PRIMARY}]TLS Checker Usage[/{constants.CLI_COLOR_PRIMARY}][/bold]",
            expand=True,
        )
    )
