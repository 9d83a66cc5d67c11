"""
Shared test fixtures for the RBAC Generator test suites.
"""

import pytest

from rbac_generator.libs.core.constants import GeneratorConstants
from rbac_generator.libs.core.config import GenerationOptions
from rbac_generator.libs.generate.models import PermissionRule


CONTROLLER_SOURCE = """package controller

// +kubebuilder:rbac:groups=core,resources=pods,verbs=get
// +kubebuilder:rbac:groups="",resources=pods,verbs=list
// +kubebuilder:rbac:groups=apps,resources=deployments,verbs=get;list;watch;create;update;patch;delete
// +kubebuilder:rbac:groups=apps,resources=deployments/status,verbs=get;update;patch
func Reconcile() {}
"""

WEBHOOK_SOURCE = '''"""Webhook handlers."""

# +rbac:groups=admissionregistration.k8s.io,resources=validatingwebhookconfigurations,verbs=get;list
# +rbac:urls=/metrics,verbs=get
def handle():
    pass
'''


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep RBAC_GENERATOR_* variables of the caller out of the tests"""
    for name in (GeneratorConstants.ENV_NAME, GeneratorConstants.ENV_INPUT_DIR,
                 GeneratorConstants.ENV_OUTPUT_DIR, GeneratorConstants.ENV_DEBUG):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def source_tree(tmp_path):
    """Annotated source tree with Go and Python files"""
    pkg = tmp_path / "pkg"
    (pkg / "controller").mkdir(parents=True)
    (pkg / "webhook").mkdir()
    (pkg / "controller" / "controller.go").write_text(CONTROLLER_SOURCE)
    (pkg / "webhook" / "handlers.py").write_text(WEBHOOK_SOURCE)
    (pkg / "README.md").write_text("// +kubebuilder:rbac:groups=ignored,resources=ignored,verbs=get\n")
    return pkg


@pytest.fixture
def output_dir(tmp_path):
    """Empty output directory"""
    out = tmp_path / "config"
    out.mkdir()
    return out


@pytest.fixture
def options(source_tree, output_dir):
    """Valid generation options pointing at the fixture tree"""
    return GenerationOptions(name="manager", input_dir=str(source_tree), output_dir=str(output_dir))


@pytest.fixture
def pod_rules():
    """Two rules on core pods differing only in verbs"""
    return [
        PermissionRule(api_groups=[""], resources=["pods"], verbs=["get"]),
        PermissionRule(api_groups=[""], resources=["pods"], verbs=["list"]),
    ]
