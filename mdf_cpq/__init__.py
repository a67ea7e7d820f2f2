"""MDF powder coating configurator: pricing, quoting and Business Central submission."""

__version__ = "1.0.0"
