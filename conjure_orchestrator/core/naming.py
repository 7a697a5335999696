"""
Naming Convention - unit names, generator names, task names

Every string convention the orchestrator relies on lives here:
- '<root>-<suffix>' unit names and the identifier derived from them
- the reserved 'conjure-' generator prefix
- lower-camel-case task names ('compile conjure rust' -> 'compileConjureRust')

All functions are pure.
"""
import re
from typing import Optional

from conjure_orchestrator.config import GENERATOR_DEP_PREFIX
from conjure_orchestrator.errors import InvalidTopology, MalformedGeneratorName
from conjure_orchestrator.schemas.project_schema import TargetKind

FIRST_CLASS_TARGETS = frozenset(kind.value for kind in TargetKind)


def derive_language(root_name: str, unit_name: str) -> str:
    """
    Strip '<root_name>-' from a unit name.

    Raises:
        InvalidTopology: If the unit is not named after the root
    """
    prefix = root_name + "-"
    if not unit_name.startswith(prefix) or len(unit_name) == len(prefix):
        raise InvalidTopology(root_name, unit_name)
    return unit_name[len(prefix):]


def is_first_class(identifier: str) -> bool:
    return identifier in FIRST_CLASS_TARGETS


def first_class_kind(identifier: str) -> Optional[TargetKind]:
    """TargetKind for a first-class identifier, None for generic ones"""
    if not is_first_class(identifier):
        return None
    return TargetKind(identifier)


def sibling_name(root_name: str, kind: TargetKind) -> str:
    return f"{root_name}-{kind.value}"


def generator_language(dependency_name: str, coordinate: Optional[str] = None) -> str:
    """
    Language identifier of a generator dependency ('conjure-rust' -> 'rust').

    Raises:
        MalformedGeneratorName: If the name lacks the reserved prefix
    """
    if not dependency_name.startswith(GENERATOR_DEP_PREFIX) or dependency_name == GENERATOR_DEP_PREFIX:
        raise MalformedGeneratorName(dependency_name, GENERATOR_DEP_PREFIX, coordinate)
    return dependency_name[len(GENERATOR_DEP_PREFIX):]


def generator_dependency_name(language: str) -> str:
    return GENERATOR_DEP_PREFIX + language


def to_lower_camel_case(text: str) -> str:
    """'compile conjure my-lang' -> 'compileConjureMyLang'"""
    words = [w for w in re.split(r"[^A-Za-z0-9]+", text) if w]
    if not words:
        return ""
    head = words[0][0].lower() + words[0][1:]
    return head + "".join(w[0].upper() + w[1:] for w in words[1:])


def capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]


def clean_task_name(task_name: str) -> str:
    """Name of the cleanup work item paired with `task_name`"""
    return "clean" + capitalize(task_name)


__all__ = [
    "FIRST_CLASS_TARGETS",
    "derive_language",
    "is_first_class",
    "first_class_kind",
    "sibling_name",
    "generator_language",
    "generator_dependency_name",
    "to_lower_camel_case",
    "capitalize",
    "clean_task_name",
]
