"""
RBAC Generator

Generates ClusterRole and ClusterRoleBinding manifests for a controller from
the RBAC annotations in its source comments.
"""

__version__ = "1.0.0"
__author__ = "OLMv1 Project"

from .libs import GenerationOptions, PermissionRule, RBACGenerator, main

__all__ = [
    'GenerationOptions',
    'PermissionRule',
    'RBACGenerator',
    'main'
]
