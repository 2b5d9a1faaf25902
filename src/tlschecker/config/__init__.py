import logging
from os import path
from pathlib import Path
from copy import deepcopy
from typing import Union

import yaml

from ..exceptions import ConfigurationError
from ..models import ProtocolVersion

__module__ = "tlschecker.config"

logger = logging.getLogger(__name__)
DEFAULT_CONFIG = ".tlschecker-config.yaml"
CONFIG_PATH = f"{path.expanduser('~')}/.config/tlschecker"


def _deep_merge(*args) -> dict:
    assert len(args) >= 2, "_deep_merge requires at least two dicts to merge"
    result = deepcopy(args[0])
    if not isinstance(result, dict):
        raise AttributeError(
            f"_deep_merge only takes dict arguments, got {type(result)} {result}"
        )
    for merge_dict in args[1:]:
        if not isinstance(merge_dict, dict):
            raise AttributeError(
                f"_deep_merge only takes dict arguments, got {type(merge_dict)} {merge_dict}"
            )
        for key, merge_val in merge_dict.items():
            result_val = result.get(key)
            if isinstance(result_val, dict) and isinstance(merge_val, dict):
                result[key] = _deep_merge(result_val, merge_val)
            else:
                result[key] = deepcopy(merge_val)
    return result


def _validate_config(combined_config: dict) -> dict:
    defaults = combined_config.setdefault("defaults", {})
    port = defaults.get("port")
    if isinstance(port, str) and port.isdigit():
        port = int(port)
    if not port:  # falsey type coercion
        port = 443
    if not isinstance(port, int) or isinstance(port, bool) or not 0 < port < 65536:
        raise ConfigurationError(f"port {port} is not a valid TCP port")
    defaults["port"] = port

    timeout = defaults.get("timeout")
    if (
        not isinstance(timeout, (int, float))
        or isinstance(timeout, bool)
        or timeout <= 0
    ):
        raise ConfigurationError(f"timeout {timeout} must be a positive number")

    versions = defaults.get("versions") or [v.value for v in ProtocolVersion]
    if isinstance(versions, str):
        versions = [versions]
    try:
        requested = {ProtocolVersion(str(v)) for v in versions}
    except ValueError as err:
        raise ConfigurationError(
            f"versions must be chosen from {', '.join(v.value for v in ProtocolVersion)}"
        ) from err
    defaults["versions"] = [v.value for v in ProtocolVersion if v in requested]
    defaults["use_sni"] = bool(defaults.get("use_sni", True))
    defaults["parallel_probes"] = bool(defaults.get("parallel_probes", False))
    combined_config.setdefault("outputs", [])
    return combined_config


def combine_configs(user_conf: dict, custom_conf: dict) -> dict:
    default_values = base_config()
    ret_config = _deep_merge(
        {"defaults": default_values.get("defaults", {})},
        {"defaults": user_conf.get("defaults", {})},
        {"defaults": custom_conf.get("defaults", {})},
    )
    outputs = list(custom_conf.get("outputs", []))
    outputs.extend(
        [
            item
            for item in user_conf.get("outputs", [])
            if item["type"] not in [i["type"] for i in outputs]
        ]
    )
    if not outputs:
        outputs = default_values.get("outputs", [])
    ret_config["outputs"] = outputs
    return _validate_config(ret_config)


def get_config(custom_values: Union[dict, None] = None) -> dict:
    user_config = load_config(path.join(CONFIG_PATH, DEFAULT_CONFIG))
    return combine_configs(user_config, custom_values or {})


def base_config() -> dict:
    return yaml.safe_load(
        Path(path.join(str(Path(__file__).parent), "base.yaml")).read_bytes()
    )


def load_config(filename: str = DEFAULT_CONFIG) -> dict:
    config_path = Path(filename)
    if config_path.is_file():
        logger.debug(config_path.absolute())
        try:
            return yaml.safe_load(config_path.read_text(encoding="utf8")) or {}
        except yaml.YAMLError as err:
            raise ConfigurationError(f"bad configuration file {filename}") from err
    return {}
