"""
Constants Module

Centralized constants for the RBAC Generator tool to eliminate magic strings
and improve maintainability.
"""


class GeneratorConstants:
    """Generation defaults and environment variable names"""

    # Default option values - simple attributes for configurable values
    DEFAULT_NAME = "manager"
    DEFAULT_INPUT_DIR = "./pkg"
    DEFAULT_OUTPUT_DIR = "./config"

    # Environment variables read through python-decouple
    ENV_NAME = "RBAC_GENERATOR_NAME"
    ENV_INPUT_DIR = "RBAC_GENERATOR_INPUT_DIR"
    ENV_OUTPUT_DIR = "RBAC_GENERATOR_OUTPUT_DIR"
    ENV_DEBUG = "RBAC_GENERATOR_DEBUG"

    # Name derivation suffixes
    ROLE_SUFFIX = "-role"
    ROLE_BINDING_SUFFIX = "-rolebinding"
    NAMESPACE_SUFFIX = "-system"


class KubernetesConstants:
    """Kubernetes-related constants with improved enum-based structure"""

    from enum import Enum

    # API Group constants - simple attributes for extensible values
    RBAC_API_GROUP = "rbac.authorization.k8s.io"
    RBAC_API_VERSION = f"{RBAC_API_GROUP}/v1"
    CORE_API_GROUP = ""  # Core API group (empty string)

    # Subject granted the generated role
    DEFAULT_SERVICE_ACCOUNT = "default"

    class ResourceKind(str, Enum):
        """Kinds of the generated manifests"""
        CLUSTER_ROLE = "ClusterRole"
        CLUSTER_ROLE_BINDING = "ClusterRoleBinding"

        def __str__(self) -> str:
            """Return the kind for use in manifests"""
            return self.value

    class SubjectKind(str, Enum):
        """Subject kinds a binding can grant a role to"""
        SERVICE_ACCOUNT = "ServiceAccount"

        def __str__(self) -> str:
            """Return the subject kind for use in manifests"""
            return self.value


class AnnotationConstants:
    """Constants describing the RBAC annotation grammar"""

    from enum import Enum

    # Marker prefixes recognised at the start of a comment
    MARKER_PREFIXES = ("+kubebuilder:rbac:", "+rbac:")

    # Line comment tokens per scanned extension
    COMMENT_PREFIXES = {
        ".go": ("//",),
        ".py": ("#",),
    }
    # Tokens tried for extensions without their own entry
    DEFAULT_COMMENT_PREFIXES = ("//", "#")

    # Separators used inside a marker
    PAIR_SEPARATOR = ","
    VALUE_SEPARATOR = ";"

    # Alias accepted for the core API group
    CORE_GROUP_ALIAS = "core"

    class AnnotationKey(str, Enum):
        """Keys accepted in an RBAC marker"""
        GROUPS = "groups"
        RESOURCES = "resources"
        RESOURCE_NAMES = "resourceNames"
        VERBS = "verbs"
        URLS = "urls"
        NAMESPACE = "namespace"

        def __str__(self) -> str:
            """Return the key as written in annotations"""
            return self.value

    class SourceExtension(str, Enum):
        """File extensions scanned for annotations"""
        GO = ".go"
        PYTHON = ".py"

        def __str__(self) -> str:
            """Return the extension value for use in file filtering"""
            return self.value

        @classmethod
        def get_all(cls) -> tuple:
            """Get all scanned extensions"""
            return tuple(ext.value for ext in cls)


class FileConstants:
    """File and directory related constants with improved enum-based structure"""

    from enum import Enum

    # Output manifest names - fixed per run
    ROLE_MANIFEST_BASENAME = "rbac_role"
    ROLE_BINDING_MANIFEST_BASENAME = "rbac_role_binding"

    # Mode requested when creating manifest files (umask applies)
    MANIFEST_FILE_MODE = 0o666

    class FileExtension(str, Enum):
        """File extensions used in the RBAC Generator tool"""
        YAML = ".yaml"

        def __str__(self) -> str:
            """Return the extension value for use in file operations"""
            return self.value


class ErrorMessages:
    """Centralized error message templates with improved enum-based structure"""

    from enum import Enum

    class ConfigError(str, Enum):
        """Configuration-related error message templates"""
        EMPTY_NAME = "Identity name cannot be empty"
        INVALID_INPUT_DIR = "invalid input directory '{path}': {reason}"
        INVALID_OUTPUT_DIR = "invalid output directory '{path}': {reason}"
        INVALID_LABEL = "Invalid label '{label}', expected KEY=VALUE"
        INVALID_LABEL_TYPE = "Label keys and values must be strings: {label}"
        CONFIG_FILE_NOT_FOUND = "Configuration file not found: {config_path}"

        def __str__(self) -> str:
            """Return the error message template"""
            return self.value

    class ScanError(str, Enum):
        """Annotation scanning error message templates"""
        UNREADABLE_FILE = "failed to read {path}: {reason}"
        UNREADABLE_DIR = "failed to walk {path}: {reason}"
        MISSING_SEPARATOR = "{position}: expected key=value in '{pair}'"
        UNKNOWN_KEY = "{position}: unknown RBAC annotation key '{key}'"
        EMPTY_VERBS = "{position}: RBAC rule has no verbs"
        NO_TARGET = "{position}: RBAC rule names neither resources nor urls"
        MIXED_TARGET = "{position}: RBAC rule mixes resources and urls"
        MISSING_GROUPS = "{position}: RBAC rule names resources but no groups"
        URL_WITH_RESOURCE_FIELDS = "{position}: RBAC rule with urls cannot set groups or resourceNames"

        def __str__(self) -> str:
            """Return the error message template"""
            return self.value

    class RenderError(str, Enum):
        """Serialization error message templates"""
        UNSUPPORTED_RESOURCE = "Cannot render resource of type {type_name}"
        YAML_FAILURE = "Failed to serialize {kind} '{name}': {reason}"

        def __str__(self) -> str:
            """Return the error message template"""
            return self.value

    class WriteError(str, Enum):
        """Manifest write error message templates"""
        WRITE_FAILED = "failed to write {kind} manifest file '{path}': {reason}"

        def __str__(self) -> str:
            """Return the error message template"""
            return self.value
