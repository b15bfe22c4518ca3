"""TV remote control over NEC infrared or Roku ECP."""

__version__ = "0.1.0"
