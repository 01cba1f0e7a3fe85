"""Line-level declaration file parsing."""

from .parser import DeclarationParser

__all__ = ["DeclarationParser"]
