"""Switch a package reference to a project reference and back.

Both declarations stay in the project file.  The condition marker decides
which one the build sees:

    <PackageReference Include="Scrutor" Version="3.3.0" Condition="'$(PSWITCH)' == '../Scrutor/Scrutor.csproj'" />
    <ProjectReference Include="../Scrutor/Scrutor.csproj" Condition="'$(PSWITCH)' != 'Scrutor'" />

``PSWITCH`` is never defined, so the package is inert and the project
reference active.  The package condition stores the project path and the
project condition stores the package name, which is how ``restore_package``
finds both again.  The file is edited as text so nothing outside these two
elements changes.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from pswitch.config import Project
from pswitch.dotnet import xmltext
from pswitch.dotnet.project import disabled_condition, enabled_condition, parse_condition
from pswitch.errors import PackageNotFound, SwitchConflict, SwitchStateNotFound
from pswitch.textfile import TextFile

logger = logging.getLogger(__name__)

PACKAGE_TAG = "PackageReference"
PROJECT_TAG = "ProjectReference"


@dataclass
class Change:
    """One project file rewritten by a switch or restore."""
    project: Project
    package_name: str
    reference_path: str
    target_path: str = ""


def relative_reference(project: Project, target: Project) -> str:
    """Path from the project's folder to the target project, '/'-separated."""
    rel = os.path.relpath(target.absolute_path, os.path.dirname(project.absolute_path))
    return rel.replace(os.sep, "/")


def _find_package(text: str, package_name: str) -> xmltext.Element | None:
    return xmltext.find_element(
        text, PACKAGE_TAG, lambda e: e.attributes.get("Include") == package_name
    )


def switch_conflict(project: Project, package_name: str, conditions: list[str]) -> SwitchConflict | None:
    """Why ``package_name`` cannot be switched in ``project``, if it cannot.

    ``conditions`` holds the Condition of each declaration of the package,
    in document order.  Only the first declaration is switched, so it must
    carry no condition, and no other declaration may stay active beside
    the project reference.
    """
    first = conditions[0]
    if first:
        is_switched, switch_reference = parse_condition(first)
        if is_switched:
            return SwitchConflict(
                f"Package '{package_name}' in '{project.absolute_path}' "
                f"is already switched to '{switch_reference}'"
            )
        return SwitchConflict(
            f"Package '{package_name}' in '{project.absolute_path}' "
            f"has a condition that cannot be restored: {first}"
        )
    live = sum(1 for c in conditions if not c)
    if live > 1:
        return SwitchConflict(
            f"Package '{package_name}' is declared {live} times in '{project.absolute_path}'"
        )
    return None


def switch_package(project: Project, package_name: str, target: Project) -> Change:
    """Disable ``package_name`` in ``project`` and reference ``target`` instead."""
    reference_path = relative_reference(project, target)

    text_file = TextFile.read(project.absolute_path)
    text = text_file.text

    declarations = [
        e for e in xmltext.iter_elements(text, PACKAGE_TAG)
        if e.attributes.get("Include") == package_name
    ]
    if not declarations:
        raise PackageNotFound(package_name, project.absolute_path)

    conflict = switch_conflict(project, package_name, [e.attributes.get("Condition", "") for e in declarations])
    if conflict is not None:
        raise conflict

    element = declarations[0]
    start_tag = element.start_tag(text)
    disabled_tag = xmltext.set_attribute(start_tag, "Condition", disabled_condition(reference_path))
    disabled = disabled_tag + text[element.tag_end:element.end]
    project_reference = xmltext.render_element(PROJECT_TAG, {
        "Include": reference_path,
        "Condition": enabled_condition(package_name),
    })

    text_file.write(xmltext.splice(text, [(element.start, element.end, disabled + project_reference)]))

    logger.info(f"Switched {project.name} package {package_name} reference => {target.name} ({target.absolute_path})")
    return Change(project, package_name, reference_path, target.absolute_path)


def restore_package(project: Project, package_name: str) -> Change:
    """Re-enable ``package_name`` in ``project`` and drop its project reference."""
    text_file = TextFile.read(project.absolute_path)
    text = text_file.text

    package = _find_package(text, package_name)
    if package is None:
        raise SwitchStateNotFound(package_name, project.absolute_path, "package reference not found")

    is_switched, reference_path = parse_condition(package.attributes.get("Condition", ""))
    if not is_switched:
        raise SwitchStateNotFound(package_name, project.absolute_path, "package reference is not switched")

    def is_synthetic(e: xmltext.Element) -> bool:
        return parse_condition(e.attributes.get("Condition", "")) == (True, package_name)

    reference = xmltext.find_element(text, PROJECT_TAG, is_synthetic)
    if reference is None:
        raise SwitchStateNotFound(package_name, project.absolute_path, "switched project reference not found")

    restored_tag = xmltext.remove_attribute(package.start_tag(text), "Condition")
    ref_start, ref_end = reference.start, reference.end
    if ref_start != package.end:
        # Moved or reformatted since the switch
        ref_start, ref_end = xmltext.line_span(text, ref_start, ref_end)

    text_file.write(xmltext.splice(text, [
        (package.start, package.tag_end, restored_tag),
        (ref_start, ref_end, ""),
    ]))

    target_path = os.path.abspath(
        os.path.join(os.path.dirname(project.absolute_path), reference_path)
    )
    logger.info(f"Restored {project.name} package {package_name} reference (removed: => {target_path})")
    return Change(project, package_name, reference_path, target_path)
