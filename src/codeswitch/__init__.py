"""codeswitch: jump to any repository under a code root by its short name."""

__version__ = "0.3.0"
