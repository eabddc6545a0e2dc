"""I/O layer: content cache backends and the drug record catalog."""
