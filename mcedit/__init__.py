"""mcedit package: sandboxed file editing served over a JSON-RPC stdio transport.

This package exposes submodules directly; only the version lives at the top level.
"""

__version__ = "0.1.0"

__all__: list[str] = ["__version__"]
