"""
Discovery - Topology -> LanguageMappings

Walks the root unit's children once and classifies each one:
- '<root>-<first-class suffix>' units map to a TargetKind
- any other '<root>-<suffix>' unit is a generic target for language <suffix>
- children not named after the root are not generation targets and are skipped
"""
import logging
from typing import Dict, List

from conjure_orchestrator.core import naming
from conjure_orchestrator.schemas.project_schema import BuildUnit, LanguageMapping, TargetKind

logger = logging.getLogger(__name__)


def discover(root: BuildUnit) -> List[LanguageMapping]:
    """Classify the root's children, ordered by unit name"""
    mappings = []
    prefix = root.name + "-"
    for name in sorted(root.children):
        if not name.startswith(prefix) or name == prefix:
            logger.debug(f"[Discovery] Skipping {name}: not named '{prefix}<suffix>'")
            continue
        identifier = naming.derive_language(root.name, name)
        mappings.append(LanguageMapping(
            unit=root.children[name],
            identifier=identifier,
            kind=naming.first_class_kind(identifier),
        ))

    logger.info(
        f"[Discovery] {root.name}: "
        + (", ".join(f"{m.unit.name} ({m.identifier})" for m in mappings) or "no generation targets")
    )
    return mappings


def first_class(mappings: List[LanguageMapping]) -> Dict[TargetKind, LanguageMapping]:
    return {m.kind: m for m in mappings if not m.is_generic}


def generic(mappings: List[LanguageMapping]) -> List[LanguageMapping]:
    return [m for m in mappings if m.is_generic]


__all__ = ["discover", "first_class", "generic"]
