"""Package version, printed in the generated header."""

__version__ = "0.1.0"
