"""
Manifest Renderer

Serializes roles and role bindings to YAML. Resources are first expressed as
typed Kubernetes client models, converted to their API dictionaries and then
dumped with sorted keys so equal content always yields equal bytes.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Union

import yaml
from kubernetes import client

from ..core.constants import ErrorMessages, FileConstants, KubernetesConstants
from ..core.exceptions import SerializationError
from .models import PermissionRule, Role, RoleBinding

logger = logging.getLogger(__name__)

# Extension of the rendered manifests
FILE_EXTENSION = FileConstants.FileExtension.YAML.value


class ManifestDumper(yaml.SafeDumper):
    """YAML dumper that never emits anchors or aliases"""

    def ignore_aliases(self, data):
        return True


def _optional_list(values: Sequence[str]) -> Optional[List[str]]:
    # Empty fields are omitted from the manifest
    return list(values) if values else None


def _policy_rule(rule: PermissionRule) -> client.V1PolicyRule:
    return client.V1PolicyRule(
        api_groups=_optional_list(rule.api_groups),
        resources=_optional_list(rule.resources),
        resource_names=_optional_list(rule.resource_names),
        non_resource_ur_ls=_optional_list(rule.non_resource_urls),
        verbs=list(rule.verbs)
    )


def _metadata(name: str, labels: Dict[str, str]) -> client.V1ObjectMeta:
    return client.V1ObjectMeta(name=name, labels=dict(labels) or None)


def _cluster_role(role: Role) -> client.V1ClusterRole:
    return client.V1ClusterRole(
        api_version=KubernetesConstants.RBAC_API_VERSION,
        kind=KubernetesConstants.ResourceKind.CLUSTER_ROLE.value,
        metadata=_metadata(role.name, role.labels),
        rules=[_policy_rule(rule) for rule in role.rules]
    )


def _cluster_role_binding(binding: RoleBinding) -> client.V1ClusterRoleBinding:
    return client.V1ClusterRoleBinding(
        api_version=KubernetesConstants.RBAC_API_VERSION,
        kind=KubernetesConstants.ResourceKind.CLUSTER_ROLE_BINDING.value,
        metadata=_metadata(binding.name, binding.labels),
        role_ref=client.V1RoleRef(
            api_group=KubernetesConstants.RBAC_API_GROUP,
            kind=binding.role_ref_kind,
            name=binding.role_ref_name
        ),
        subjects=[
            client.RbacV1Subject(
                kind=binding.subject_kind,
                name=binding.subject_name,
                namespace=binding.subject_namespace
            )
        ]
    )


def to_manifest(resource: Union[Role, RoleBinding]) -> Dict[str, Any]:
    """
    Convert a resource to its Kubernetes API dictionary

    Args:
        resource: Role or RoleBinding

    Returns:
        Dict with apiVersion, kind, metadata and the kind-specific fields

    Raises:
        SerializationError: If the resource type is unknown or a field is invalid
    """
    if isinstance(resource, Role):
        build_model = _cluster_role
    elif isinstance(resource, RoleBinding):
        build_model = _cluster_role_binding
    else:
        raise SerializationError(
            ErrorMessages.RenderError.UNSUPPORTED_RESOURCE.format(type_name=type(resource).__name__)
        )

    try:
        model = build_model(resource)
        with client.ApiClient() as api_client:
            return api_client.sanitize_for_serialization(model)
    except (ValueError, TypeError, AttributeError) as e:
        # Model validation failed or a value is not a JSON-like type
        raise SerializationError(
            ErrorMessages.RenderError.YAML_FAILURE.format(
                kind=type(resource).__name__, name=resource.name, reason=e
            )
        ) from e


def render(resource: Union[Role, RoleBinding]) -> bytes:
    """
    Render a resource to UTF-8 encoded YAML

    Args:
        resource: Role or RoleBinding

    Returns:
        YAML document bytes, stable for equal content

    Raises:
        SerializationError: If the resource cannot be expressed in YAML
    """
    manifest = to_manifest(resource)
    try:
        content = yaml.dump(
            manifest,
            Dumper=ManifestDumper,
            default_flow_style=False,
            sort_keys=True,
            allow_unicode=True,
            encoding='utf-8'
        )
    except yaml.YAMLError as e:
        raise SerializationError(
            ErrorMessages.RenderError.YAML_FAILURE.format(
                kind=manifest.get('kind'), name=resource.name, reason=e
            )
        ) from e

    logger.debug(f"Rendered {manifest.get('kind')} '{resource.name}' ({len(content)} bytes)")
    return content
