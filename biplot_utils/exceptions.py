"""
Biplot Exceptions

Errors raised by the biplot helpers. Each one also derives from the builtin
exception callers would catch for the same problem, so ``except ValueError``
keeps working around validation failures.
"""


class BiplotError(Exception):
    """Base class for every biplot error."""


class InvalidArgument(BiplotError, ValueError):
    """Malformed component pair or a PCA result missing required structure."""


class InvalidComponentSelection(BiplotError, ValueError):
    """A requested component index exceeds the components available."""

    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(
            f"Component {requested} was requested but the PCA result only "
            f"has {available} components"
        )


class MissingRenderingCapability(BiplotError, RuntimeError):
    """The renderer cannot build one of the chart layers."""

    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__(
            f"Renderer is missing required operations: {', '.join(self.missing)}"
        )


class DegenerateScaleError(BiplotError, ZeroDivisionError):
    """All selected case projections are zero, so cases cannot be scaled."""
