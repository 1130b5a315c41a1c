"""Application context: the runtime paths every router and service shares.

Routers receive this object instead of individual path strings.
"""

from __future__ import annotations

import os


class AppContext:
    """Holds runtime directory paths for the application."""

    def __init__(self, *, cwd: str, data_dir: str, config_path: str) -> None:
        self._cwd = cwd
        self._data_dir = data_dir
        self._config_path = config_path
        # Static paths derived from the package location
        self._app_dir = os.path.dirname(__file__)

    @property
    def data_dir(self) -> str:
        return self._data_dir

    @property
    def config_path(self) -> str:
        return self._config_path

    @property
    def static_dir(self) -> str:
        return os.path.join(self._app_dir, "static")

    # Logs stay in cwd, not in data_dir
    @property
    def logs_dir(self) -> str:
        return os.path.join(self._cwd, "logs")

    def ensure_dirs(self) -> None:
        """Create all required directories if they don't exist."""
        for d in (self.data_dir, self.logs_dir):
            os.makedirs(d, exist_ok=True)
