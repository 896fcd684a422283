"""Core installation engine for gpmctl."""
