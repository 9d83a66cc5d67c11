"""
Generate Libraries

Aggregates permission rules and turns them into ClusterRole and
ClusterRoleBinding manifests.
"""

from .models import PermissionRule, Role, RoleBinding, SourcePosition
from .aggregator import aggregate, validate_rules
from .builder import ResourceNames, build_role, build_role_binding, derive_names
from .renderer import FILE_EXTENSION, ManifestDumper, render, to_manifest

__all__ = [
    # Models
    'PermissionRule',
    'Role',
    'RoleBinding',
    'SourcePosition',
    # Aggregation
    'aggregate',
    'validate_rules',
    # Building
    'ResourceNames',
    'build_role',
    'build_role_binding',
    'derive_names',
    # Rendering
    'FILE_EXTENSION',
    'ManifestDumper',
    'render',
    'to_manifest'
]
