"""
Data Models Module.

Typed structures flowing through the generation pipeline: permission rules
discovered in the source tree and the two resources built from them.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, NamedTuple, Optional, Tuple

from ..core.constants import KubernetesConstants


class SourcePosition(NamedTuple):
    """File and line an annotation was read from"""
    path: str
    line: int

    def __str__(self) -> str:
        return f"{self.path}:{self.line}"


def _as_tuple(values: Optional[Iterable[str]]) -> Tuple[str, ...]:
    if values is None:
        return ()
    if isinstance(values, str):
        return (values,)
    return tuple(values)


@dataclass(frozen=True)
class PermissionRule:
    """
    One grantable capability statement.

    Attributes:
        api_groups: API groups of the targeted resources ("" is the core group)
        resources: Targeted resource types
        resource_names: Optional restriction to named objects
        verbs: Allowed verbs, never empty for a valid rule
        non_resource_urls: Targeted non-resource URLs
        source: Annotation position, not part of the grant
    """
    api_groups: Tuple[str, ...] = ()
    resources: Tuple[str, ...] = ()
    resource_names: Tuple[str, ...] = ()
    verbs: Tuple[str, ...] = ()
    non_resource_urls: Tuple[str, ...] = ()
    source: Optional[SourcePosition] = field(default=None, compare=False)

    def __post_init__(self):
        # Accept any iterable of strings; store tuples so rules stay hashable
        for name in ('api_groups', 'resources', 'resource_names', 'verbs', 'non_resource_urls'):
            object.__setattr__(self, name, _as_tuple(getattr(self, name)))

    def target_key(self) -> Tuple[Tuple[str, ...], ...]:
        """Return the normalised non-verb fields used to group rules"""
        return (
            tuple(sorted(set(self.api_groups))),
            tuple(sorted(set(self.resources))),
            tuple(sorted(set(self.resource_names))),
            tuple(sorted(set(self.non_resource_urls))),
        )

    def describe_position(self) -> str:
        """Return the annotation position, or a rule summary when unknown"""
        if self.source is not None:
            return str(self.source)
        return f"rule(resources={list(self.resources)}, urls={list(self.non_resource_urls)})"


@dataclass(frozen=True)
class Role:
    """Cluster-wide role carrying the aggregated rules"""
    name: str
    labels: Dict[str, str]
    rules: Tuple[PermissionRule, ...]


@dataclass(frozen=True)
class RoleBinding:
    """Grant of the generated role to the controller's service account"""
    name: str
    labels: Dict[str, str]
    subject_name: str
    subject_namespace: str
    role_ref_name: str
    subject_kind: str = KubernetesConstants.SubjectKind.SERVICE_ACCOUNT.value
    role_ref_kind: str = KubernetesConstants.ResourceKind.CLUSTER_ROLE.value
