"""Hide files in the low bits of image pixels and recover them, with small hash, cipher and argument-parsing helpers."""

__version__ = "1.0.0"
__all__ = ["__version__"]