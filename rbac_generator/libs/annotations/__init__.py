"""
Annotation Libraries

Discovers RBAC permission rules from markers in source comments.
"""

from .parser import AnnotationParser, parse_dir

__all__ = [
    'AnnotationParser',
    'parse_dir'
]
