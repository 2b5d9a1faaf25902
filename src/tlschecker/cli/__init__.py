from typing import Union

from rich.console import Console
from rich.table import Table

from .. import constants


def outputln(
    message: str,
    con: Union[Console, None] = None,
    result_level: str = constants.RESULT_LEVEL_INFO,
    result_text: str = None,
    result_icon: str = None,
    use_icons: bool = False,
    aside: str = "",
    hostname: str = None,
    port: int = None,
):
    if not isinstance(con, Console) or result_level not in constants.CLI_COLOR_MAP:
        return
    color = constants.CLI_COLOR_MAP[result_level]
    if result_text is None:
        result_text = constants.DEFAULT_MAP[result_level]
    icon = ""
    if use_icons:
        icon = result_icon or constants.CLI_ICON_MAP.get(result_level, "")
    if hostname:
        aside += f"{hostname}:{port}" if port else hostname

    table = Table.grid(expand=True)
    table.add_column()
    table.add_column(justify="right", style="dim", no_wrap=True, overflow=None)
    table.add_row(f"{icon} [{color}]{result_text} {message}[/{color}]".strip(), aside)
    con.print(table)


def failln(message: str, con: Union[Console, None] = None, **kwargs):
    outputln(message, con=con, result_level=constants.RESULT_LEVEL_FAIL, **kwargs)
