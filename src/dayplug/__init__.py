"""dayplug: backup-agent plugin that files backups into day buckets."""

__version__ = "0.0.1"

# Reported by `plugin_api_version`; the orchestrator selects command semantics by it.
PLUGIN_API_VERSION = "0.5.0"
