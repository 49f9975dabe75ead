"""Jira implementation of the issue fetch contracts."""
from __future__ import annotations

from pathlib import Path

from jira_fetch_impl.jira_config import DEFAULT_CONFIG_PATH, PropertiesConfigLoader
from jira_fetch_impl.orchestrator import FetchOrchestrator
from jira_fetch_impl.result_writer import ResultWriter


def get_orchestrator(
    config_path: str | Path = DEFAULT_CONFIG_PATH,
    output_dir: str | Path = ".",
) -> FetchOrchestrator:
    """Return a FetchOrchestrator configured from the properties file.

    The file is created with placeholder values if it does not exist yet.

    Raises:
        ConfigBootstrapError: If the configuration cannot be read or created.
    """
    return FetchOrchestrator.from_loader(
        PropertiesConfigLoader(config_path),
        writer=ResultWriter(output_dir),
    )
