"""
Exceptions

Error hierarchy shared by every layer of the RBAC Generator tool.
"""

from typing import Optional


class RBACGeneratorError(Exception):
    """Base exception for all RBAC Generator errors"""
    pass


class ConfigurationError(RBACGeneratorError):
    """Raised when options, directories or the configuration file are invalid"""
    pass


class ScanError(RBACGeneratorError):
    """Raised when the annotated source tree cannot be read or parsed"""
    pass


class InvalidRuleError(ScanError):
    """Raised when a discovered rule violates the permission rule invariants"""
    pass


class SerializationError(RBACGeneratorError):
    """Raised when a resource cannot be rendered to its textual form"""
    pass


class ManifestWriteError(RBACGeneratorError):
    """Raised when a rendered manifest cannot be written to disk"""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path
