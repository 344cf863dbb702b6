"""config-sync: compare and synchronize configuration object stores."""

__version__ = "0.4.0"
