"""Domain errors raised by the catalog, cache and tool handlers."""


class NykoError(Exception):
    """Base class for errors a tool call reports back to the caller."""


class PatternNotFoundError(NykoError):
    """The requested pattern is absent from the index or the catalog."""

    def __init__(self, pattern_id: str) -> None:
        super().__init__(f"Pattern not found: {pattern_id}")
        self.pattern_id = pattern_id


class CatalogUnavailableError(NykoError):
    """The catalog could not be read for a reason other than a missing pattern.

    ``status`` is 0 when no usable HTTP status applies: transport failures
    and documents that were served but could not be parsed.
    """

    def __init__(self, url: str, status: int, reason: str | None = None) -> None:
        if reason:
            message = f"Invalid catalog document: {url} ({reason})"
        else:
            message = f"Failed to fetch from catalog: {url} (status: {status})"
        super().__init__(message)
        self.url = url
        self.status = status
        self.reason = reason


class InvalidPatternDocumentError(NykoError):
    """A catalog document could not be parsed into a pattern."""

    def __init__(self, pattern_id: str, reason: str) -> None:
        super().__init__(f"Invalid pattern document for {pattern_id}: {reason}")
        self.pattern_id = pattern_id
        self.reason = reason


class DependencyCycleError(NykoError):
    """The dependency graph loops back on itself."""

    def __init__(self, path: list[str]) -> None:
        super().__init__(f"Dependency cycle detected: {' -> '.join(path)}")
        self.path = path
