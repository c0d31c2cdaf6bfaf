"""Extension layer — plugin system via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus single-file plugins in ``.pagetrail/plugins/``.
INVARIANT: Hook failures propagate to the caller that triggered them.
"""

from pagetrail.plugins.manager import PluginManager

__all__ = ["PluginManager"]
