"""procmon - Linux system and process metrics from the /proc tree."""

__version__ = "0.1.0"
