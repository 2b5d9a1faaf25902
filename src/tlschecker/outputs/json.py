import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from . import parse_filename
from ..models import ProbeReport

__module__ = "tlschecker.outputs.json"

logger = logging.getLogger(__name__)


def save_to(template_filename: str, report: ProbeReport, **kwargs) -> str:
    """
    Write one host's report as JSON, the filename template may use
    {hostname} {port} {date_iso8601} {date_year} {date_month} {date_day}
    """
    filename = parse_filename(
        template_filename, hostname=report.hostname, port=report.port, **kwargs
    )
    json_path = Path(filename)
    Path(json_path.parent).mkdir(parents=True, exist_ok=True)
    json_path.write_text(
        json.dumps(
            {
                "generator": "tlschecker",
                "version": kwargs.get("cli_version"),
                "date": datetime.now(timezone.utc).replace(microsecond=0).isoformat(),
                "report": report.to_dict(),
            },
            sort_keys=True,
            indent=4,
            default=str,
        ),
        encoding="utf8",
    )
    logger.debug(f"saved {json_path.as_posix()}")
    return json_path.as_posix()
