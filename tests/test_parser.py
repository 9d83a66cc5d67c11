"""
Annotation parser tests: marker grammar, tree walking and scan errors.
"""

import re

import pytest

from rbac_generator.libs.annotations.parser import AnnotationParser, parse_dir
from rbac_generator.libs.core.exceptions import ScanError
from rbac_generator.libs.generate.models import PermissionRule, SourcePosition


POSITION = SourcePosition("pkg/controller.go", 7)


class TestExtractMarker:
    """Test recognition of RBAC comment lines"""

    @pytest.mark.parametrize("line,expected", [
        ("// +kubebuilder:rbac:groups=apps,resources=deployments,verbs=get\n",
         "groups=apps,resources=deployments,verbs=get"),
        ("    //+rbac:urls=/metrics,verbs=get", "urls=/metrics,verbs=get"),
        ("# +kubebuilder:rbac:groups=core,resources=pods,verbs=list", "groups=core,resources=pods,verbs=list"),
        ("\t#   +rbac:groups=batch,resources=jobs,verbs=create  ", "groups=batch,resources=jobs,verbs=create"),
    ])
    def test_markers(self, line, expected):
        """Comment lines with a marker prefix yield the marker body"""
        assert AnnotationParser.extract_marker(line) == expected

    @pytest.mark.parametrize("line", [
        "// +kubebuilder:object:root=true",
        "// rbac:groups=apps,resources=deployments,verbs=get",
        "x = '+rbac:groups=apps,resources=deployments,verbs=get'",
        "",
    ])
    def test_non_markers(self, line):
        """Other comments and code lines are ignored"""
        assert AnnotationParser.extract_marker(line) is None

    def test_restricted_comment_tokens(self):
        """Only the given comment tokens introduce a marker"""
        line = "# +rbac:groups=apps,resources=deployments,verbs=get"

        assert AnnotationParser.extract_marker(line, ("//",)) is None
        assert AnnotationParser.extract_marker(line, ("#",)) == "groups=apps,resources=deployments,verbs=get"


class TestParseMarker:
    """Test decoding of marker bodies"""

    def setup_method(self):
        self.parser = AnnotationParser()

    def test_full_marker(self):
        """All keys map onto rule fields"""
        # Act
        rule = self.parser.parse_marker(
            "groups=apps;batch,resources=deployments;jobs,resourceNames=web,verbs=get;update,namespace=demo",
            POSITION
        )

        # Assert
        assert rule == PermissionRule(
            api_groups=["apps", "batch"],
            resources=["deployments", "jobs"],
            resource_names=["web"],
            verbs=["get", "update"]
        )
        assert rule.source == POSITION

    @pytest.mark.parametrize("groups", ["core", '""'])
    def test_core_group_aliases(self, groups):
        """Both 'core' and an empty quoted group mean the core API group"""
        rule = self.parser.parse_marker(f"groups={groups},resources=pods,verbs=get", POSITION)

        assert rule.api_groups == ("",)

    def test_urls(self):
        """URLs become non-resource URLs"""
        rule = self.parser.parse_marker("urls=/metrics;/healthz,verbs=get", POSITION)

        assert rule.non_resource_urls == ("/metrics", "/healthz")
        assert rule.resources == ()

    def test_missing_separator(self):
        """A pair without '=' reports its position"""
        with pytest.raises(ScanError, match="pkg/controller.go:7: expected key=value in 'verbs'"):
            self.parser.parse_marker("groups=apps,resources=deployments,verbs", POSITION)

    def test_unknown_key(self):
        """Unknown keys are rejected"""
        with pytest.raises(ScanError, match="unknown RBAC annotation key 'verb'"):
            self.parser.parse_marker("groups=apps,resources=deployments,verb=get", POSITION)


class TestParseDir:
    """Test walking an annotated source tree"""

    def test_discovers_go_and_python_markers(self, source_tree):
        """Markers from .go and .py files are returned in path and line order"""
        # Act
        rules = parse_dir(str(source_tree))

        # Assert
        assert [rule.resources for rule in rules] == [
            ("pods",),
            ("pods",),
            ("deployments",),
            ("deployments/status",),
            ("validatingwebhookconfigurations",),
            (),
        ]
        assert rules[0].source == SourcePosition(str(source_tree / "controller" / "controller.go"), 3)
        assert rules[-1].non_resource_urls == ("/metrics",)

    def test_ignores_other_extensions_and_hidden_dirs(self, tmp_path):
        """Only configured extensions outside hidden directories are read"""
        # Arrange
        (tmp_path / ".git").mkdir()
        (tmp_path / ".git" / "hook.py").write_text("# +rbac:groups=apps,resources=deployments,verbs=get\n")
        (tmp_path / "notes.txt").write_text("# +rbac:groups=apps,resources=deployments,verbs=get\n")

        # Act & Assert
        assert parse_dir(str(tmp_path)) == []

    def test_comment_token_follows_file_type(self, tmp_path):
        """Go files only use '//' comments and Python files only '#'"""
        # Arrange
        (tmp_path / "main.go").write_text(
            "# +rbac:groups=apps,resources=deployments,verbs=get\n"
            "// +rbac:groups=batch,resources=jobs,verbs=get\n"
        )
        (tmp_path / "tasks.py").write_text(
            "// +rbac:groups=apps,resources=deployments,verbs=get\n"
            "# +rbac:groups=\"\",resources=pods,verbs=get\n"
        )

        # Act
        rules = parse_dir(str(tmp_path))

        # Assert
        assert [rule.resources for rule in rules] == [("jobs",), ("pods",)]
        assert [rule.source.line for rule in rules] == [2, 2]

    def test_custom_extensions(self, tmp_path):
        """The parser can be pointed at other file types"""
        # Arrange
        (tmp_path / "main.rs").write_text("// +rbac:groups=apps,resources=deployments,verbs=get\n")

        # Act
        rules = AnnotationParser(extensions=[".rs"]).parse_dir(str(tmp_path))

        # Assert
        assert len(rules) == 1

    def test_malformed_marker_reports_file_and_line(self, tmp_path):
        """Scan errors identify the offending file and line"""
        # Arrange
        source = tmp_path / "bad.go"
        source.write_text("package bad\n\n// +kubebuilder:rbac:groups=apps,oops\n")

        # Act & Assert
        with pytest.raises(ScanError, match=re.escape(f"{source}:3")):
            parse_dir(str(tmp_path))

    def test_undecodable_file(self, tmp_path):
        """Unreadable files abort the scan"""
        # Arrange
        (tmp_path / "binary.go").write_bytes(b"\xff\xfe\x00\x81")

        # Act & Assert
        with pytest.raises(ScanError, match="failed to read"):
            parse_dir(str(tmp_path))
