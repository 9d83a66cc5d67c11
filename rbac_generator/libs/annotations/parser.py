"""
RBAC Annotation Parser

Walks an annotated source tree and decodes RBAC markers found in line
comments into permission rules, e.g.

    // +kubebuilder:rbac:groups=apps,resources=deployments,verbs=get;list;watch
    # +rbac:groups=core,resources=pods,verbs=get
    // +kubebuilder:rbac:urls=/metrics,verbs=get
"""

import logging
import os
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..core.constants import AnnotationConstants, ErrorMessages, KubernetesConstants
from ..core.exceptions import ScanError
from ..generate.models import PermissionRule, SourcePosition

logger = logging.getLogger(__name__)

AnnotationKey = AnnotationConstants.AnnotationKey


class AnnotationParser:
    """Decodes RBAC markers from source files"""

    def __init__(self, extensions: Optional[Sequence[str]] = None):
        """
        Initialize annotation parser

        Args:
            extensions: File extensions to scan (defaults to .go and .py)
        """
        self.extensions = tuple(extensions or AnnotationConstants.SourceExtension.get_all())

    def parse_dir(self, input_dir: str) -> List[PermissionRule]:
        """
        Parse every matching file below input_dir

        Files are visited in sorted path order and hidden directories are
        skipped.

        Args:
            input_dir: Root of the annotated source tree

        Returns:
            Rules in discovery order

        Raises:
            ScanError: If the tree cannot be read or a marker is malformed
        """
        rules: List[PermissionRule] = []
        file_count = 0

        for path in self._iter_source_files(input_dir):
            file_count += 1
            rules.extend(self.parse_file(path))

        logger.info(f"Discovered {len(rules)} RBAC rules in {file_count} files under {input_dir}")
        return rules

    def _iter_source_files(self, input_dir: str) -> Iterable[str]:
        def on_error(error: OSError):
            raise ScanError(
                ErrorMessages.ScanError.UNREADABLE_DIR.format(path=error.filename, reason=error.strerror)
            )

        for root, dirs, files in os.walk(input_dir, onerror=on_error):
            # Prune hidden directories and fix traversal order
            dirs[:] = sorted(d for d in dirs if not d.startswith('.'))
            for filename in sorted(files):
                if filename.endswith(self.extensions):
                    yield os.path.join(root, filename)

    def parse_file(self, path: str) -> List[PermissionRule]:
        """
        Parse the RBAC markers of a single file

        Args:
            path: Source file path

        Returns:
            Rules in line order

        Raises:
            ScanError: If the file cannot be read or a marker is malformed
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                lines = f.readlines()
        except (OSError, UnicodeDecodeError) as e:
            raise ScanError(ErrorMessages.ScanError.UNREADABLE_FILE.format(path=path, reason=e)) from e

        comment_prefixes = AnnotationConstants.COMMENT_PREFIXES.get(
            os.path.splitext(path)[1], AnnotationConstants.DEFAULT_COMMENT_PREFIXES
        )

        rules = []
        for line_num, line in enumerate(lines, 1):
            marker = self.extract_marker(line, comment_prefixes)
            if marker is None:
                continue
            rule = self.parse_marker(marker, SourcePosition(path, line_num))
            logger.debug(f"{path}:{line_num}: {rule}")
            rules.append(rule)
        return rules

    @staticmethod
    def extract_marker(line: str,
                       comment_prefixes: Sequence[str] = AnnotationConstants.DEFAULT_COMMENT_PREFIXES) -> Optional[str]:
        """
        Return the marker body of an RBAC comment line, None otherwise

        Args:
            line: Raw source line
            comment_prefixes: Line comment tokens of the file's language

        Returns:
            Text after the marker prefix, e.g. "groups=apps,resources=deployments,verbs=get"
        """
        text = line.strip()
        for comment in comment_prefixes:
            if text.startswith(comment):
                text = text[len(comment):].strip()
                break
        else:
            return None

        for prefix in AnnotationConstants.MARKER_PREFIXES:
            if text.startswith(prefix):
                return text[len(prefix):].strip()
        return None

    def parse_marker(self, marker: str, position: SourcePosition) -> PermissionRule:
        """
        Decode a marker body into a permission rule

        Args:
            marker: Comma-separated key=value pairs, values separated by ';'
            position: Where the marker was found, used in errors

        Returns:
            PermissionRule (not yet validated against the rule invariants)

        Raises:
            ScanError: On a pair without '=' or an unknown key
        """
        values: Dict[str, List[str]] = {}

        for pair in marker.split(AnnotationConstants.PAIR_SEPARATOR):
            pair = pair.strip()
            if not pair:
                continue

            key, sep, raw_value = pair.partition('=')
            key = key.strip()
            if not sep:
                raise ScanError(ErrorMessages.ScanError.MISSING_SEPARATOR.format(position=position, pair=pair))

            try:
                annotation_key = AnnotationKey(key)
            except ValueError:
                raise ScanError(ErrorMessages.ScanError.UNKNOWN_KEY.format(position=position, key=key)) from None

            values.setdefault(annotation_key.value, []).extend(self._split_values(raw_value))

        return PermissionRule(
            api_groups=self._normalize_groups(values.get(AnnotationKey.GROUPS.value, [])),
            resources=values.get(AnnotationKey.RESOURCES.value, []),
            resource_names=values.get(AnnotationKey.RESOURCE_NAMES.value, []),
            verbs=values.get(AnnotationKey.VERBS.value, []),
            non_resource_urls=values.get(AnnotationKey.URLS.value, []),
            source=position
        )

    @staticmethod
    def _split_values(raw_value: str) -> List[str]:
        items = []
        for item in raw_value.split(AnnotationConstants.VALUE_SEPARATOR):
            item = item.strip()
            if len(item) >= 2 and item[0] == item[-1] == '"':
                # Quoted value, "" is the core group
                items.append(item[1:-1])
            elif item:
                items.append(item)
        return items

    @staticmethod
    def _normalize_groups(groups: List[str]) -> Tuple[str, ...]:
        return tuple(
            KubernetesConstants.CORE_API_GROUP if group == AnnotationConstants.CORE_GROUP_ALIAS else group
            for group in groups
        )


def parse_dir(input_dir: str) -> List[PermissionRule]:
    """
    Parse RBAC annotations below input_dir with the default parser

    Args:
        input_dir: Root of the annotated source tree

    Returns:
        Rules in discovery order
    """
    return AnnotationParser().parse_dir(input_dir)
