"""termctx: pointer-triggered context menu for terminal-like hosts."""

__version__ = "0.1.0"
