"""streamhop: stream-link resolution for Italian streaming providers."""

__version__ = "0.1.0"
