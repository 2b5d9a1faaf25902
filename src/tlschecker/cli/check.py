import logging
from typing import Union

from rich.console import Console
from rich.prompt import Prompt

from . import outputln, failln, outputs
from .. import TLSChecker, __version__, util
from ..exceptions import InvalidHostnameError
from ..models import ProbeReport
from ..outputs.json import save_to

__module__ = "tlschecker.cli.check"

logger = logging.getLogger(__name__)
EXIT_WORDS = ["quit", "exit"]
HELP_WORDS = ["help"]


def check(
    domain: str,
    config: dict,
    con: Union[Console, None] = None,
    use_icons: bool = False,
) -> Union[ProbeReport, None]:
    try:
        hostname = util.normalize_hostname(domain)
    except InvalidHostnameError as err:
        failln(str(err), result_text="INVALID", con=con, use_icons=use_icons)
        return None

    port = config["defaults"]["port"]
    outputln(
        "Checking TLS support status...",
        hostname=hostname,
        port=port,
        result_text="PROBE",
        result_icon=":globe_with_meridians:",
        con=con,
        use_icons=use_icons,
    )
    report = TLSChecker(config=config).check_host(hostname)
    if con is not None:
        outputs.print_report(report, con)

    for output in config.get("outputs", []):
        if output.get("type") != "json" or not output.get("path"):
            continue
        json_file = save_to(output["path"], report, cli_version=__version__)
        outputln(
            json_file,
            aside="core",
            result_text="SAVED",
            result_icon=":floppy_disk:",
            con=con,
            use_icons=use_icons,
        )
    return report


def interactive(config: dict, con: Console, use_icons: bool = False) -> None:
    outputs.print_usage(con, timeout=config["defaults"]["timeout"])
    while True:
        try:
            answer = Prompt.ask(
                "Enter domain (quit/exit to end)", console=con, default="", show_default=False
            ).strip()
        except (EOFError, KeyboardInterrupt):
            con.print("\nExiting program.")
            return
        if not answer:
            continue
        if answer.lower() in EXIT_WORDS:
            con.print("Exiting program.")
            return
        if answer.lower() in HELP_WORDS:
            outputs.print_usage(con, timeout=config["defaults"]["timeout"])
            continue
        check(answer, config, con=con, use_icons=use_icons)
        con.print()
