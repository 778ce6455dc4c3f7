"""Product availability service: reserve-buffer and weekend rules over a pluggable stock source."""

__version__ = "1.0.0"
