"""Entry point for the LPS25H sensor module.

The host runtime starts this process with the path of the socket it expects
the module on, e.g.:

    lps25h-module /tmp/viam-module-lps25h.sock
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer

from sensehat import Module, ModelRegistry, load_sensor_plugins, register_plugins
from sensehat.errors import SenseHatError
from sensehat.plugins import lps25h
from sensehat.resource import SENSOR_API

logger = logging.getLogger("lps25h")

app = typer.Typer(add_completion=False, context_settings={"help_option_names": ["-h", "--help"]})


async def main_with_args(address: str, plugins_dir: Optional[Path]) -> None:
    registry = ModelRegistry()
    register_plugins(registry, load_sensor_plugins(plugins_dir))

    module = Module(address, registry)
    module.add_model_from_registry(SENSOR_API, lps25h.MODEL)
    try:
        module.start()
        # Blocks until SIGINT/SIGTERM; close() below releases every resource.
        await module.run_until_shutdown()
    finally:
        module.close()


@app.command()
def run(
    address: str = typer.Argument(..., help="Socket path handed over by the host runtime."),
    log_level: str = typer.Option("INFO", "--log-level", envvar="LPS25H_LOG_LEVEL", help="Logging level."),
    plugins_dir: Optional[Path] = typer.Option(
        None, "--plugins-dir", envvar="SENSOR_PLUGINS_DIR", help="Extra directory searched for driver plugins."
    ),
) -> None:
    """Run the module until the host shuts it down."""

    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        asyncio.run(main_with_args(address, plugins_dir))
    except SenseHatError as exc:
        logger.error("module failed: %s", exc)
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        pass


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
