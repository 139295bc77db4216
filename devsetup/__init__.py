"""devsetup — interactive macOS development-environment installer."""

__version__ = "0.1.0"
