"""Parse .csproj/.vbproj/.fsproj files (XML with MSBuild schema)."""

from __future__ import annotations

import logging
import os
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from pswitch.config import PackageReference, ProjectReference
from pswitch.errors import ProjectParseError

logger = logging.getLogger(__name__)

# Never defined by any build, so '$(PSWITCH)' always evaluates to ''.
MARKER_PROPERTY = "PSWITCH"

# '$(PSWITCH)' == 'value'  or  '$(PSWITCH)' != 'value'
_CONDITION_RE = re.compile(
    r"'\$\(" + MARKER_PROPERTY + r"\)'\s*(?P<op>==|!=)\s*'(?P<value>.+)'"
)


def parse_condition(condition: str) -> tuple[bool, str]:
    """Return (is_switched, switch_reference) for a Condition attribute value."""
    match = _CONDITION_RE.search(condition or "")
    if not match:
        return False, ""
    return True, match.group("value")


def disabled_condition(value: str) -> str:
    return f"'$({MARKER_PROPERTY})' == '{value}'"


def enabled_condition(value: str) -> str:
    return f"'$({MARKER_PROPERTY})' != '{value}'"


@dataclass
class ProjectInfo:
    """Parsed information from a single project file."""
    path: str
    project_references: list[ProjectReference] = field(default_factory=list)
    package_references: list[PackageReference] = field(default_factory=list)


def normalise_include(include: str) -> str:
    """Convert an MSBuild path to forward slashes."""
    return include.strip().replace("\\", "/")


def parse_project_file(project_path: str) -> ProjectInfo:
    """Parse a project file and return its package and project references.

    Handles both SDK-style and legacy (namespaced) project formats.
    Project reference paths are resolved against the project's folder but
    not checked for existence.
    """
    info = ProjectInfo(path=project_path)

    try:
        tree = ET.parse(project_path)
        root = tree.getroot()
    except ET.ParseError as e:
        raise ProjectParseError(project_path, str(e)) from e
    except OSError as e:
        raise ProjectParseError(project_path, e.strerror or str(e)) from e

    # Strip namespace from tags for easier querying
    ns = ""
    if root.tag.startswith("{"):
        ns = root.tag.split("}")[0] + "}"

    project_dir = os.path.dirname(project_path)

    for pr in root.iter(f"{ns}ProjectReference"):
        specified = pr.get("Include", "")
        if not specified.strip():
            logger.warning(f"Empty project reference in project file '{project_path}'")
            continue
        is_switched, switch_reference = parse_condition(pr.get("Condition", ""))
        absolute = os.path.abspath(os.path.join(project_dir, normalise_include(specified)))
        info.project_references.append(ProjectReference(
            specified_path=specified,
            absolute_path=absolute,
            is_switched=is_switched,
            switch_reference=switch_reference,
        ))

    for pkg in root.iter(f"{ns}PackageReference"):
        name = pkg.get("Include", "")
        if not name:
            # <PackageReference Update="..."> only amends an existing reference
            continue
        version = pkg.get("Version", "")
        if not version:
            # Version might be a child element
            ver_elem = pkg.find(f"{ns}Version")
            if ver_elem is not None and ver_elem.text:
                version = ver_elem.text.strip()
        condition = pkg.get("Condition", "")
        is_switched, switch_reference = parse_condition(condition)
        info.package_references.append(PackageReference(
            name=name,
            version=version,
            is_switched=is_switched,
            switch_reference=switch_reference,
            condition=condition,
        ))

    return info
