"""
Manifest Builder

Constructs the in-memory role and role binding for a generation run. Both
builders derive their names from derive_names so the binding always
references the role built for the same options.
"""

from typing import NamedTuple, Sequence

from ..core.config import GenerationOptions
from ..core.constants import ErrorMessages, GeneratorConstants, KubernetesConstants
from ..core.exceptions import ConfigurationError
from .models import PermissionRule, Role, RoleBinding


class ResourceNames(NamedTuple):
    """Names derived from one identity name"""
    role: str
    binding: str
    namespace: str


def derive_names(identity_name: str) -> ResourceNames:
    """
    Derive role, binding and namespace names from the identity name

    Args:
        identity_name: Non-empty prefix, e.g. "manager"

    Returns:
        ResourceNames such as ("manager-role", "manager-rolebinding", "manager-system")

    Raises:
        ConfigurationError: If identity_name is empty
    """
    if not identity_name:
        raise ConfigurationError(ErrorMessages.ConfigError.EMPTY_NAME)

    return ResourceNames(
        role=f"{identity_name}{GeneratorConstants.ROLE_SUFFIX}",
        binding=f"{identity_name}{GeneratorConstants.ROLE_BINDING_SUFFIX}",
        namespace=f"{identity_name}{GeneratorConstants.NAMESPACE_SUFFIX}"
    )


def build_role(rules: Sequence[PermissionRule], options: GenerationOptions) -> Role:
    """
    Build the role carrying the aggregated rules.

    Args:
        rules: Aggregator output, used verbatim
        options: Generation options supplying name and labels

    Returns:
        Role named "<name>-role"
    """
    names = derive_names(options.name)
    return Role(
        name=names.role,
        labels=dict(options.labels),
        rules=tuple(rules)
    )


def build_role_binding(options: GenerationOptions) -> RoleBinding:
    """
    Build the binding granting the role to the default service account.

    Args:
        options: Generation options supplying name and labels

    Returns:
        RoleBinding named "<name>-rolebinding" for namespace "<name>-system"
    """
    names = derive_names(options.name)
    return RoleBinding(
        name=names.binding,
        labels=dict(options.labels),
        subject_name=KubernetesConstants.DEFAULT_SERVICE_ACCOUNT,
        subject_namespace=names.namespace,
        role_ref_name=names.role
    )
