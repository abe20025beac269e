"""Logic to make losses configurable."""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

import gin
import gin.config
from termcolor import colored

T = TypeVar("T")

_PARAM_PATTERN = re.compile(
    r"([A-Za-z0-9_./]+(?:\.[A-Za-z0-9_]+)?)\s*=\s*(.+?)(?:\s*#.*)?$",
    re.MULTILINE,
)


def configurable(cls: T) -> T:
    """Combine gin.configurable and dataclass for configuration.

    Returns:
        A gin configurable dataclass.

    """
    decorated_cls = dataclass(cls)  # Apply dataclass first
    return gin.configurable(decorated_cls)  # Then make it gin configurable


def _clean(value: str) -> str:
    return value.strip().rstrip(";").strip()


def parse_gin_config(config_path: str | Path) -> dict[str, str]:
    """Parse a gin config file and display all parameters in scope with color coding.

    Raises:
        FileNotFoundError: in case the config file does not exist.

    Args:
        config_path: Path to the gin config file

    Returns:
        Parameters set explicitly in the file, mapped to their raw values.

    """
    config_path = Path(config_path)

    if not config_path.exists():
        msg = f"Config file not found: {config_path}"
        raise FileNotFoundError(msg)

    gin.parse_config_file(str(config_path))

    content = config_path.read_text()
    all_bindings = gin.config_str()

    print(colored("╔═══════════════════════════════════════════════", "white"))
    print(colored("║ Gin configuration", "white", attrs=["bold"]))
    print(colored("╠═══════════════════════════════════════════════", "white"))

    print(colored("║ Explicitly Set Parameters:", "yellow", attrs=["bold"]))
    explicitly_set = {}

    for match in _PARAM_PATTERN.finditer(content):
        param_path, value = match.groups()
        explicitly_set[param_path.strip()] = _clean(value)
        print(f"{colored(f'║ {param_path}', 'green')} = {colored(_clean(value), 'cyan')}")

    print(colored("║", "white"))
    print(colored("║ Default/Inherited Parameters:", "yellow", attrs=["bold"]))

    for match in _PARAM_PATTERN.finditer(all_bindings):
        param_path, value = match.groups()
        param_path = param_path.strip()

        # Already shown above
        if param_path in explicitly_set:
            continue

        print(f"{colored(f'║ {param_path}', 'blue')} = {colored(_clean(value), 'magenta')}")

    print(colored("╚═══════════════════════════════════════════════", "white"))

    # Also display the operative configuration (what Gin will actually use)
    print(colored("\nOperative Configuration:", "white", attrs=["bold"]))
    print(colored(gin.operative_config_str(), "white"))

    return explicitly_set
