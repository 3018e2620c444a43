"""Error taxonomy. Every failure that aborts a build derives from IconTableError.

Errors raised in worker processes are pickled back to the parent, hence the
explicit ``__reduce__`` methods.
"""

from __future__ import annotations

from pathlib import Path


class IconTableError(Exception):
    """Base class for all build-aborting errors."""


class ScanError(IconTableError):
    """A source directory could not be read."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")

    def __reduce__(self):
        return type(self), (self.path, self.reason)


class DuplicateSourceError(IconTableError):
    """Two source files claim the same icon at the same size."""

    def __init__(self, first: Path, second: Path, size: int) -> None:
        self.first = first
        self.second = second
        self.size = size
        super().__init__(f"duplicate {size}px source: {first} and {second}")

    def __reduce__(self):
        return type(self), (self.first, self.second, self.size)


class SceneError(IconTableError):
    """Base for errors raised while interpreting one source document."""

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        self.message = message
        self.path = Path(path) if path is not None else None
        super().__init__(self._format())

    def __reduce__(self):
        return type(self), (self.message, self.path)

    def _format(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.path}: {self.message}"

    def with_path(self, path: Path | str) -> SceneError:
        """Attach the source path once it is known, keeping the original message."""
        self.path = Path(path)
        self.args = (self._format(),)
        return self


class SceneParseError(SceneError):
    """Malformed document, number, path data, transform or canvas."""


class UnsupportedFeatureError(SceneError):
    """A supported element uses a feature outside the flattenable subset."""

    def __init__(self, feature: str, element: str, path: Path | str | None = None) -> None:
        self.feature = feature
        self.element = element
        super().__init__(f"unsupported feature {feature!r} on <{element}>", path)

    def __reduce__(self):
        return type(self), (self.feature, self.element, self.path)


class UnsupportedNodeError(SceneError):
    """An element kind the resolver does not understand."""

    def __init__(self, kind: str, path: Path | str | None = None) -> None:
        self.kind = kind
        super().__init__(f"unsupported element <{kind}>", path)

    def __reduce__(self):
        return type(self), (self.kind, self.path)


class IdentifierError(IconTableError):
    """An icon name cannot be turned into an identifier."""


class IdentifierCollisionError(IdentifierError):
    """Two distinct icons normalise to the same identifier."""

    def __init__(self, identifier: str, first: object, second: object) -> None:
        self.identifier = identifier
        self.first = first
        self.second = second
        super().__init__(f"identifier {identifier} is shared by {first} and {second}")
