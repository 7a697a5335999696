"""
Configuration errors

Raised while the build graph is being configured. Any of these aborts
configuration before a single work item runs; OptionalIntegrationUnavailable
is the exception, it is caught by the integration registry and only logged.
"""
from typing import Optional


class ConfigurationError(Exception):
    """Base class for fatal configuration-time errors"""
    pass


class InvalidTopology(ConfigurationError):
    """Raised when a unit name does not follow the '<root>-<suffix>' convention"""

    def __init__(self, root_name: str, unit_name: str):
        self.root_name = root_name
        self.unit_name = unit_name
        super().__init__(
            f"Unit '{unit_name}' is not named '{root_name}-<suffix>'"
        )


class MalformedGeneratorName(ConfigurationError):
    """Raised when a declared generator dependency lacks the reserved prefix"""

    def __init__(self, name: str, prefix: str, coordinate: Optional[str] = None):
        self.name = name
        self.prefix = prefix
        self.coordinate = coordinate
        super().__init__(
            f"Generators should start with '{prefix}' according to conjure RFC 002, "
            f"but found name: '{name}' ({coordinate or name})"
        )


class MissingGenerator(ConfigurationError):
    """Raised when a generic unit has no matching generator dependency"""

    def __init__(self, unit_name: str, expected_name: str):
        self.unit_name = unit_name
        self.expected_name = expected_name
        super().__init__(
            f"Discovered subproject {unit_name} without corresponding "
            f"generator dependency with name '{expected_name}'"
        )


class MissingSibling(ConfigurationError):
    """Raised when a first-class unit requires a sibling unit that is absent"""

    def __init__(self, unit_name: str, sibling_name: str):
        self.unit_name = unit_name
        self.sibling_name = sibling_name
        super().__init__(f"Cannot enable '{unit_name}' without '{sibling_name}'")


class AmbiguousGenerator(ConfigurationError):
    """Raised when two declared generators map to the same language"""

    def __init__(self, language: str, coordinates):
        self.language = language
        self.coordinates = list(coordinates)
        super().__init__(
            f"Multiple generator dependencies for language '{language}': " + ", ".join(self.coordinates)
        )


class InvalidCoordinate(ConfigurationError):
    """Raised when a generator coordinate is not 'group:name[:version][@ext]'"""

    def __init__(self, coordinate: str):
        self.coordinate = coordinate
        super().__init__(f"Invalid dependency coordinate: '{coordinate}'")


class DeclarationsFinalized(ConfigurationError):
    """Raised when a generator is declared after declarations were finalized"""
    pass


class DuplicateWorkItem(ConfigurationError):
    """Raised when two work items would share a name"""
    pass


class GraphCycleError(ConfigurationError):
    """Raised when dependency edges do not form a DAG"""

    def __init__(self, cycle):
        self.cycle = list(cycle)
        super().__init__("Work item dependencies form a cycle: " + " -> ".join(self.cycle))


class ExtractionError(Exception):
    """Raised when an executable cannot be materialized"""
    pass


class ExecutionError(Exception):
    """Raised when one or more work items fail during execution"""

    def __init__(self, message: str, failed: Optional[dict] = None, skipped=()):
        self.failed = dict(failed or {})
        self.skipped = list(skipped)
        super().__init__(message)


class OptionalIntegrationUnavailable(Exception):
    """Raised by an integration probe when its extension point cannot be located"""

    def __init__(self, integration: str, reason: str):
        self.integration = integration
        self.reason = reason
        super().__init__(f"{integration}: {reason}")


__all__ = [
    "ConfigurationError",
    "InvalidTopology",
    "MalformedGeneratorName",
    "InvalidCoordinate",
    "MissingGenerator",
    "MissingSibling",
    "AmbiguousGenerator",
    "DeclarationsFinalized",
    "DuplicateWorkItem",
    "GraphCycleError",
    "OptionalIntegrationUnavailable",
    "ExtractionError",
    "ExecutionError",
]
