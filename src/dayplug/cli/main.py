"""CLI entry point for dayplug (invoked by the backup orchestrator).

Invocation shape::

    dayplug <subcommand> [config-path] [local-path-or-bucket] [ignored...]
"""

from __future__ import annotations

import logging
import sys
import time
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import IO

import click

from dayplug import PLUGIN_API_VERSION, __version__
from dayplug.core.config import PluginSettings, load_settings
from dayplug.core.errors import ConfigError, PluginError
from dayplug.core.transfer import TransferEngine

PROG_NAME = "dayplug"

log = logging.getLogger(__name__)

# Orchestrators append scope/content-id arguments that the plugin ignores
_PASSTHROUGH = {"ignore_unknown_options": True, "allow_extra_args": True}


class PluginCommandError(click.ClickException):
    """Reports a plugin failure as a single prefixed line on stderr."""

    exit_code = 1

    def show(self, file: IO | None = None) -> None:
        click.echo(f"{PROG_NAME}: error: {self.format_message()}", file=file, err=True)


class PluginGroup(click.Group):
    """Click group that reports unknown subcommands as plugin errors."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        # Only a registered subcommand or --version may come first
        if args and args[0] != "--version" and self.get_command(ctx, args[0]) is None:
            raise PluginCommandError(f"unknown subcommand: {args[0]}")
        return super().parse_args(ctx, args)


def _setup_logging(settings: PluginSettings) -> None:
    """Route package logs to stderr (stdout may carry restore data)."""
    logger = logging.getLogger("dayplug")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(logging.Formatter(f"{PROG_NAME}: %(message)s"))
    logger.addHandler(stream_handler)

    if settings.log_file is not None:
        try:
            settings.log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(str(settings.log_file), encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"could not open log file: {e}") from e
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.WARNING))


@contextmanager
def _engine(config_path: Path | None) -> Generator[TransferEngine, None, None]:
    """Load settings once, build the engine and translate plugin errors."""
    settings = None
    try:
        settings = load_settings(config_path)
        _setup_logging(settings)
        log.debug("argv: %s", sys.argv[1:])
        engine = TransferEngine.from_settings(settings)
        log.debug("using %s store at %s", engine.store.name, engine.store.root)
        if engine.faults.enabled:
            log.info(
                "fault injection enabled: delay=%ss fail_rate=%s",
                engine.faults.delay_seconds, engine.faults.fail_rate,
            )
        yield engine
    except PluginError as e:
        log.debug("command failed: %s", e)
        raise PluginCommandError(str(e)) from e
    finally:
        if settings is not None and settings.linger_seconds > 0:
            time.sleep(settings.linger_seconds)


def _config_argument(f):
    return click.argument("config_path", required=False, type=click.Path(path_type=Path))(f)


@click.group(cls=PluginGroup, invoke_without_command=True)
@click.version_option(
    version=__version__, prog_name=PROG_NAME, message="%(prog)s version %(version)s",
)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """dayplug: backup-agent plugin filing backups into day buckets."""
    if ctx.invoked_subcommand is None:
        raise PluginCommandError("no subcommand was provided")


@cli.command("setup_plugin_for_backup", context_settings=_PASSTHROUGH)
@_config_argument
@click.argument("local_path", required=False)
def setup_plugin_for_backup(config_path: Path | None, local_path: str | None) -> None:
    """Create the backup store directory for LOCAL_PATH."""
    with _engine(config_path) as engine:
        engine.setup_for_backup(local_path)


@cli.command("setup_plugin_for_restore", context_settings=_PASSTHROUGH)
@_config_argument
@click.argument("local_path", required=False)
def setup_plugin_for_restore(config_path: Path | None, local_path: str | None) -> None:
    """Prepare a restore session (no-op)."""
    with _engine(config_path) as engine:
        engine.setup_for_restore(local_path)


@cli.command("cleanup_plugin_for_backup", context_settings=_PASSTHROUGH)
@_config_argument
@click.argument("local_path", required=False)
def cleanup_plugin_for_backup(config_path: Path | None, local_path: str | None) -> None:
    """Finish a backup session (no-op)."""
    with _engine(config_path) as engine:
        engine.cleanup_for_backup(local_path)


@cli.command("cleanup_plugin_for_restore", context_settings=_PASSTHROUGH)
@_config_argument
@click.argument("local_path", required=False)
def cleanup_plugin_for_restore(config_path: Path | None, local_path: str | None) -> None:
    """Finish a restore session (no-op)."""
    with _engine(config_path) as engine:
        engine.cleanup_for_restore(local_path)


@cli.command("backup_file", context_settings=_PASSTHROUGH)
@_config_argument
@click.argument("local_path", required=False)
def backup_file(config_path: Path | None, local_path: str | None) -> None:
    """Copy LOCAL_PATH into the backup store."""
    with _engine(config_path) as engine:
        engine.backup_file(local_path)


@cli.command("restore_file", context_settings=_PASSTHROUGH)
@_config_argument
@click.argument("local_path", required=False)
def restore_file(config_path: Path | None, local_path: str | None) -> None:
    """Copy the stored copy of LOCAL_PATH back to LOCAL_PATH."""
    with _engine(config_path) as engine:
        engine.restore_file(local_path)


@cli.command("backup_data", context_settings=_PASSTHROUGH)
@_config_argument
@click.argument("local_path", required=False)
def backup_data(config_path: Path | None, local_path: str | None) -> None:
    """Store everything read from stdin under the location of LOCAL_PATH."""
    with _engine(config_path) as engine:
        engine.backup_data(local_path, click.get_binary_stream("stdin"))


@cli.command("restore_data", context_settings=_PASSTHROUGH)
@_config_argument
@click.argument("local_path", required=False)
def restore_data(config_path: Path | None, local_path: str | None) -> None:
    """Write the data stored under the location of LOCAL_PATH to stdout."""
    with _engine(config_path) as engine:
        engine.restore_data(local_path, click.get_binary_stream("stdout"))


@cli.command("delete_backup", context_settings=_PASSTHROUGH)
@_config_argument
@click.argument("bucket", required=False)
def delete_backup(config_path: Path | None, bucket: str | None) -> None:
    """Delete the backup bucket BUCKET (e.g. a backup timestamp)."""
    with _engine(config_path) as engine:
        engine.delete_backup(bucket)


@cli.command("plugin_api_version", context_settings=_PASSTHROUGH)
def plugin_api_version() -> None:
    """Print the plugin protocol version."""
    click.echo(PLUGIN_API_VERSION)


if __name__ == "__main__":
    cli()
