"""
Configuration
-------------
Connection settings are read from a UTF-8 properties file:

    jira.url=https://myorg.atlassian.net
    jira.username=me@example.com
    jira.api.token=<token from https://id.atlassian.com/manage-profile/security/api-tokens>

Lines starting with '#' or '!' are comments. When the file does not exist it is
created with placeholder values so it can be edited by hand. A key missing from an
existing file falls back to the same placeholder without touching the file.
"""
from __future__ import annotations

import configparser
import logging
from pathlib import Path

from issue_fetch_interface.errors import ConfigBootstrapError
from issue_fetch_interface.fetcher import ConfigLoader
from issue_fetch_interface.settings import ConnectionSettings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config") / "config.properties"

URL_KEY = "jira.url"
USERNAME_KEY = "jira.username"
API_TOKEN_KEY = "jira.api.token"

#key -> (placeholder value, comment written above it on bootstrap)
_DEFAULTS: dict[str, tuple[str, str]] = {
    URL_KEY:       ("https://example.atlassian.net", "Адрес Jira / Jira URL"),
    USERNAME_KEY:  ("defaultUsername", "Имя пользователя Jira / Jira username"),
    API_TOKEN_KEY: ("defaultApiToken", "Токен API Jira / Jira API token"),
}

#properties files have no sections, configparser needs one
_SECTION = "jira"


def default_value(key: str) -> str:
    return _DEFAULTS[key][0]


def render_default_config() -> str:
    """Return the text written to a freshly bootstrapped config file."""
    lines = ["# Настройки подключения к Jira / Jira connection settings"]
    for key, (value, comment) in _DEFAULTS.items():
        lines.append(f"# {comment}")
        lines.append(f"{key}={value}")
    return "\n".join(lines) + "\n"


def parse_properties(text: str, source: str = "<string>") -> dict[str, str]:
    """Parse ``key=value`` text into a dict.

    Leading whitespace is ignored and a repeated key keeps its last value.

    Raises:
        configparser.Error: If the text is not valid properties syntax, including
            '[section]' lines, which properties files do not have.
    """
    lines = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if line.startswith("["):
            error = configparser.ParsingError(source)
            error.append(lineno, raw)
            raise error
        lines.append(line)

    parser = configparser.ConfigParser(
        delimiters=("=",),
        comment_prefixes=("#", "!"),
        interpolation=None,
        strict=False,
        empty_lines_in_values=False,
        default_section="__defaults__",
    )
    #keep keys case-sensitive, like java properties
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    parser.read_string("\n".join([f"[{_SECTION}]", *lines]), source=source)
    return dict(parser[_SECTION])


class PropertiesConfigLoader(ConfigLoader):
    """
    Args:
        path: Location of the properties file, relative to the working directory
              unless absolute. Defaults to 'config/config.properties'.
    """

    def __init__(self, path: str | Path = DEFAULT_CONFIG_PATH) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        """Return path."""
        return self._path

    def load(self) -> ConnectionSettings:
        """Read the settings, creating the file with placeholders if it is missing.

        Returns:
            ConnectionSettings populated from the file, with placeholders for
            missing or blank keys.

        Raises:
            ConfigBootstrapError: If the file exists but cannot be decoded or parsed,
                or if it was missing and could not be created.
        """
        try:
            values = self._read()
        except FileNotFoundError:
            logger.info("Config file %s not found, creating it with default values", self._path)
            self._bootstrap()
            try:
                values = self._read()
            except (OSError, UnicodeDecodeError, configparser.Error) as exc:
                raise ConfigBootstrapError(f"Failed to load configuration from {self._path}: {exc}") from exc
        except (OSError, UnicodeDecodeError, configparser.Error) as exc:
            #an existing file is never replaced, even when it is broken
            raise ConfigBootstrapError(f"Failed to load configuration from {self._path}: {exc}") from exc

        return ConnectionSettings(
            base_url=self._value(values, URL_KEY),
            username=self._value(values, USERNAME_KEY),
            api_token=self._value(values, API_TOKEN_KEY),
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _read(self) -> dict[str, str]:
        text = self._path.read_text(encoding="utf-8")
        return parse_properties(text, source=str(self._path))

    def _value(self, values: dict[str, str], key: str) -> str:
        value = values.get(key, "").strip()
        if not value:
            logger.warning("Key %s missing from %s, using default", key, self._path)
            return default_value(key)
        return value

    def _bootstrap(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            #'x' refuses to clobber a file created by someone else in the meantime
            with open(self._path, "x", encoding="utf-8") as handle:
                handle.write(render_default_config())
        except FileExistsError:
            logger.info("Config file %s appeared while bootstrapping, reading it as is", self._path)
        except OSError as exc:
            raise ConfigBootstrapError(f"Failed to create configuration file {self._path}: {exc}") from exc
