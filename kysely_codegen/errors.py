"""Error types for kysely-codegen."""

from typing import Optional, Dict, Any, List


class CodegenError(Exception):
    """Base exception for code generation errors."""

    def __init__(self, message: str, code: str = "CODEGEN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to a dictionary for structured reporting."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigError(CodegenError):
    """Invalid configuration value."""

    def __init__(self, message: str, path: Optional[List[str]] = None):
        super().__init__(message, code="CONFIG_ERROR", details={"path": path or []})
        self.path = path or []

    def __str__(self) -> str:
        if self.path:
            return f"{'.'.join(str(p) for p in self.path)}: {self.message}"
        return self.message


class UnsupportedDialectError(CodegenError):
    """Unknown dialect name or a URL that no dialect accepts."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="UNSUPPORTED_DIALECT", details=details)


class SchemaInconsistencyError(CodegenError):
    """Catalog facts that contradict each other.

    Raised when two registrations of one enum disagree on labels, when
    partitions of one table disagree on a column type, or when the same
    table identity is added twice.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="SCHEMA_INCONSISTENCY", details=details)


class SingularizationRuleError(CodegenError):
    """A singularization rule whose pattern does not compile."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(
            f"Invalid singularization rule {pattern!r}: {reason}",
            code="SINGULARIZATION_RULE_ERROR",
            details={"pattern": pattern, "reason": reason},
        )
        self.pattern = pattern
