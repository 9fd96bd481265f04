"""Neovim UI core: redraw event parsing, grid window state and batched draw commands."""

__version__ = "0.6.0"