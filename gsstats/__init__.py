"""Power-state residency readers, a ramdump dump helper and touch calibration."""

__version__ = "0.1.0"