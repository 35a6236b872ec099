"""Printer component: writes whatever it receives."""

from collections.abc import Callable
from typing import Any

import structlog
import typer

from sluice.plugins.base import BaseComponent
from sluice.plugins.config_base import ComponentConfig

slog = structlog.get_logger(__name__)


class PrinterConfig(ComponentConfig):
    """Settings for printer."""

    prefix: str = "Output:"


class Printer(BaseComponent):
    """Terminal node that echoes its input.

    Ports:
        inputs.data: any
    """

    name = "printer"
    config_model = PrinterConfig
    inputs = {"data": {"type": "any"}}
    outputs = {}

    config: PrinterConfig

    def __init__(self, config: PrinterConfig, *, writer: Callable[[str], Any] | None = None) -> None:
        super().__init__(config)
        self._write = writer if writer is not None else typer.echo

    def run(self, inputs: dict[str, Any], settings: Any) -> None:
        data = inputs["data"]
        slog.debug("printer_output", data=data)
        self._write(f"{self.config.prefix} {data}" if self.config.prefix else str(data))
