"""Background workers driving periodic sync passes."""

from .updater import DataUpdater

__all__ = ["DataUpdater"]
