"""gpmctl - Plugin and theme installer for flat-file CMS sites."""

__version__ = "0.1.0"
