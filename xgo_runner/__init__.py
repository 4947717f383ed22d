"""xgo runner - Cross-compile Go packages inside the xgo Docker toolchain.

This package resolves the toolchain image, caches external CGO dependency
archives and composes the single `docker run` invocation for a build.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
