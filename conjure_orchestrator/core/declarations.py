"""
Generator Declarations - two-phase dependency collection

Generator dependencies may be declared in any order relative to unit
discovery. They are collected while the declarations are DECLARING and
frozen by an explicit finalize(); validation only ever sees the frozen set.
"""
import logging
from enum import Enum
from typing import List, Tuple, Union

from conjure_orchestrator.errors import DeclarationsFinalized
from conjure_orchestrator.schemas.project_schema import GeneratorDependency

logger = logging.getLogger(__name__)


class DeclarationPhase(str, Enum):
    DECLARING = "DECLARING"
    FINALIZED = "FINALIZED"


class GeneratorDeclarations:
    """Collects generator dependencies until finalized"""

    def __init__(self):
        self._phase = DeclarationPhase.DECLARING
        self._dependencies: List[GeneratorDependency] = []

    @property
    def phase(self) -> DeclarationPhase:
        return self._phase

    @property
    def is_finalized(self) -> bool:
        return self._phase == DeclarationPhase.FINALIZED

    def declare(self, dependency: Union[str, GeneratorDependency]) -> GeneratorDependency:
        """
        Add a generator dependency

        Raises:
            DeclarationsFinalized: If finalize() already ran
        """
        if isinstance(dependency, str):
            dependency = GeneratorDependency.parse(dependency)
        if self.is_finalized:
            raise DeclarationsFinalized(
                f"Cannot declare generator '{dependency.coordinate}' after declarations were finalized"
            )
        if dependency not in self._dependencies:
            self._dependencies.append(dependency)
        return dependency

    def finalize(self) -> Tuple[GeneratorDependency, ...]:
        """Freeze the declarations; calling it again returns the same set"""
        if not self.is_finalized:
            self._phase = DeclarationPhase.FINALIZED
            logger.info(f"[Declarations] Finalized {len(self._dependencies)} generator dependencies")
        return tuple(self._dependencies)

    @property
    def dependencies(self) -> Tuple[GeneratorDependency, ...]:
        return tuple(self._dependencies)


__all__ = ["DeclarationPhase", "GeneratorDeclarations"]
