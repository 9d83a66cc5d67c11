"""
RBAC Generator Library

Generates least-privilege RBAC manifests from annotations in source comments.
"""

__version__ = "1.0.0"
__author__ = "OLMv1 Project"

# Core libraries
from .core import ConfigManager, GenerationOptions
from .core.exceptions import (
    RBACGeneratorError,
    ConfigurationError,
    ScanError,
    InvalidRuleError,
    SerializationError,
    ManifestWriteError
)

# Annotation libraries
from .annotations import AnnotationParser, parse_dir

# Generate libraries
from .generate import PermissionRule, Role, RoleBinding, aggregate, build_role, build_role_binding, render

# Main application
from .main_app import RBACGenerator, GenerationResult, create_rbac_generator, main

__all__ = [
    # Core
    'ConfigManager',
    'GenerationOptions',
    'RBACGeneratorError',
    'ConfigurationError',
    'ScanError',
    'InvalidRuleError',
    'SerializationError',
    'ManifestWriteError',
    # Annotations
    'AnnotationParser',
    'parse_dir',
    # Generate
    'PermissionRule',
    'Role',
    'RoleBinding',
    'aggregate',
    'build_role',
    'build_role_binding',
    'render',
    # Main
    'RBACGenerator',
    'GenerationResult',
    'create_rbac_generator',
    'main'
]
