"""Registry-specific exceptions.

Per IMPLEMENTATION_PHILOSOPHY: Clear, actionable error messages.

Everything except CLIMissingError is fatal in the resolve/build/install path
and propagates to the caller without local recovery.
"""


class RegistryError(Exception):
    """Base exception for type registry operations."""

    def __init__(self, message: str, context: dict | None = None):
        """Initialize with message and optional context.

        Args:
            message: Human-readable error message
            context: Optional dict with additional context (file paths, type paths, etc.)
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ConfigError(RegistryError):
    """Invalid project configuration or extension declaration."""


class ManifestParseError(RegistryError):
    """Manifest is not well-formed YAML/JSON or not a mapping."""


class ManifestValidationError(RegistryError):
    """Manifest violates the schema.

    Carries the structured issue list so callers can report every problem.
    """

    def __init__(self, message: str, issues: list | None = None, context: dict | None = None):
        super().__init__(message, context)
        self.issues = issues or []


class TypeNotFoundError(RegistryError):
    """Referenced type does not exist in any source."""

    def __init__(self, type_path: str, context: dict | None = None):
        super().__init__(f"Type '{type_path}' not found in any source", context)
        self.type_path = type_path


class TypeNotInstalledError(RegistryError):
    """Type is not present under the installed root."""

    def __init__(self, type_path: str, context: dict | None = None):
        super().__init__(f"Type '{type_path}' is not installed", context)
        self.type_path = type_path


class DependencyCycleError(RegistryError):
    """Type references form a cycle."""

    def __init__(self, cycle: list[str]):
        super().__init__(f"Dependency cycle detected: {' -> '.join(cycle)}", context={"cycle": cycle})
        self.cycle = cycle


class RegistryIOError(RegistryError):
    """Filesystem operation failed (read, copy, remove, write)."""

    def __init__(self, operation: str, path, cause: Exception | None = None):
        message = f"Failed to {operation} {path}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message, context={"operation": operation, "path": str(path)})
        self.operation = operation
        self.path = str(path)


class CLIMissingError(RegistryError):
    """External CLI dependency not found on PATH.

    Non-fatal: the engine reports missing CLIs as plan metadata and never raises
    this itself. Callers that want to fail hard can build one from the plan.
    """

    def __init__(self, name: str):
        super().__init__(f"CLI dependency '{name}' not found on PATH", context={"name": name})
        self.name = name
