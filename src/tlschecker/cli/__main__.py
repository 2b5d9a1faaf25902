import sys
import logging
import argparse
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from art import text2art

from . import outputln, failln
from .check import check, interactive
from .. import constants, __version__
from ..config import load_config, get_config, DEFAULT_CONFIG
from ..exceptions import ConfigurationError

__module__ = "tlschecker.cli"

REMOTE_URL = "https://pypi.org/project/tlschecker/"
APP_BANNER = text2art("tlschecker", font="tarty4")

assert sys.version_info >= (3, 9), "Requires Python 3.9 or newer"
console = Console()
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    cli = argparse.ArgumentParser(
        prog="tlschecker",
        description=f"Release {__version__} {REMOTE_URL}",
    )
    cli.add_argument(
        "domain",
        nargs="?",
        help="Domain to check, omit it to enter domains interactively",
        default=None,
    )
    cli.add_argument("--version", dest="show_version", action="store_true")
    cli.add_argument(
        "-q",
        "--quiet",
        help="show no stdout (useful in automation when producing structured data outputs)",
        dest="quiet",
        action="store_true",
    )
    cli.add_argument("--no-banner", dest="hide_banner", action="store_true")
    group = cli.add_mutually_exclusive_group()
    group.add_argument(
        "-v",
        "--errors-only",
        help="set logging level to ERROR (default CRITICAL)",
        dest="log_level_error",
        action="store_true",
    )
    group.add_argument(
        "-vv",
        "--warning",
        help="set logging level to WARNING (default CRITICAL)",
        dest="log_level_warning",
        action="store_true",
    )
    group.add_argument(
        "-vvv",
        "--info",
        help="set logging level to INFO (default CRITICAL)",
        dest="log_level_info",
        action="store_true",
    )
    group.add_argument(
        "-vvvv",
        "--debug",
        help="set logging level to DEBUG (default CRITICAL)",
        dest="log_level_debug",
        action="store_true",
    )
    cli.add_argument(
        "-p",
        "--config-path",
        help=f"Provide the path to a configuration file (Default: {DEFAULT_CONFIG})",
        dest="config_file",
        default=DEFAULT_CONFIG,
    )
    cli.add_argument(
        "--port",
        help="TCP port of the TLS endpoint (Default: 443)",
        dest="port",
        type=int,
        default=None,
    )
    cli.add_argument(
        "--timeout",
        help="seconds allowed for connect and handshake of each version (Default: 10)",
        dest="timeout",
        type=float,
        default=None,
    )
    cli.add_argument(
        "--disable-sni",
        help="Do not negotiate SNI using IDNA encoded host",
        dest="disable_sni",
        action="store_true",
    )
    cli.add_argument(
        "--parallel",
        help="Probe the protocol versions of a host concurrently",
        dest="parallel_probes",
        action="store_true",
    )
    cli.add_argument(
        "-O",
        "--json-file",
        help="Store to file as JSON, accepts {hostname} {port} {date_iso8601} placeholders",
        dest="json_file",
        default=None,
    )
    return cli


def _log_level(args: argparse.Namespace) -> int:
    if args.log_level_debug:
        return logging.DEBUG
    if args.log_level_info:
        return logging.INFO
    if args.log_level_warning:
        return logging.WARNING
    if args.log_level_error:
        return logging.ERROR
    return logging.CRITICAL


def _check_config(cli_args: dict) -> dict:
    custom = load_config(cli_args.get("config_file") or DEFAULT_CONFIG)
    defaults = custom.setdefault("defaults", {})
    if cli_args.get("port") is not None:
        defaults["port"] = cli_args["port"]
    if cli_args.get("timeout") is not None:
        defaults["timeout"] = cli_args["timeout"]
    if cli_args.get("disable_sni"):
        defaults["use_sni"] = False
    if cli_args.get("parallel_probes"):
        defaults["parallel_probes"] = True
    config = get_config(custom_values=custom)
    if cli_args.get("json_file"):
        config["outputs"] = [
            n for n in config.get("outputs", []) if n.get("type") != "json"
        ]
        config["outputs"].append({"type": "json", "path": cli_args["json_file"]})
    return config


def main(argv: list[str] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.show_version:
        if args.hide_banner:
            console.print(f"tlschecker=={__version__}\n{REMOTE_URL}")
        else:
            console.print(
                f"[bold][{constants.CLI_COLOR_PRIMARY}]{APP_BANNER}[/{constants.CLI_COLOR_PRIMARY}][/bold]\ntlschecker=={__version__}\n{REMOTE_URL}"
            )
        return 0

    handlers = []
    log_format = "%(asctime)s - %(name)s - [%(levelname)s] %(message)s"
    if not args.quiet and sys.stdout.isatty():
        log_format = "%(message)s"
        handlers.append(RichHandler(rich_tracebacks=True))
    logging.basicConfig(format=log_format, level=_log_level(args), handlers=handlers or None)

    try:
        config = _check_config(vars(args))
    except ConfigurationError as err:
        console.print(
            f"[{constants.CLI_COLOR_FAIL}]{err}[/{constants.CLI_COLOR_FAIL}]"
        )
        return 1

    use_console = (
        any(n.get("type") == "console" for n in config.get("outputs", []))
        and not args.quiet
    )
    use_icons = any(
        n.get("type") == "console" and n.get("use_icons")
        for n in config.get("outputs", [])
    )
    con = console if use_console else None
    if use_console and not args.hide_banner:
        console.print(
            f"[bold][{constants.CLI_COLOR_PRIMARY}]{APP_BANNER}[/{constants.CLI_COLOR_PRIMARY}][/bold]"
        )
    if Path(args.config_file).is_file():
        outputln(
            args.config_file,
            aside="core",
            result_text="CONFIG",
            result_icon=":file_folder:",
            con=con,
            use_icons=use_icons,
        )

    if args.domain:
        report = check(args.domain, config, con=con, use_icons=use_icons)
        return 0 if report is not None else 1

    if con is None:
        failln("a domain is required when console output is disabled", con=console)
        return 1
    interactive(config, con=con, use_icons=use_icons)
    return 0


if __name__ == "__main__":
    sys.exit(main())
