"""Plugin exceptions.

Every failure an invocation can report is a ``PluginError``; the CLI turns it
into one diagnostic line and a non-zero exit status.
"""

from __future__ import annotations


class PluginError(Exception):
    """Base exception for all plugin failures."""


class ArgumentError(PluginError):
    """A required positional argument was not supplied."""


class ConfigError(PluginError):
    """The plugin config file holds a value of the wrong shape or type."""


class LayoutError(PluginError):
    """A local path or bucket name cannot be mapped to a backup location."""


class StoreError(PluginError):
    """A filesystem step of a transfer failed."""


class InjectedFailure(PluginError):
    """Synthetic failure raised by the fault injector."""
