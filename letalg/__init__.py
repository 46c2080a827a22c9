"""Parse a small let/lambda language, lower it to a let-algebra IR and transform it."""

__version__ = "0.1.0"

__all__ = ["__version__"]