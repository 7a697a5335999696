"""
Generator Resolver - generic units -> generator dependencies

Validates the one-to-one correspondence between generic units and the
declared generator dependencies:
1. Every declared dependency must carry the reserved prefix
2. No two dependencies may resolve to the same language
3. Every generic unit must have a dependency named prefix + language

Fails loudly on the first violation. Creates no work items.
"""
import logging
from typing import Dict, Iterable, List

from conjure_orchestrator.core import naming
from conjure_orchestrator.errors import AmbiguousGenerator, MissingGenerator
from conjure_orchestrator.schemas.project_schema import GeneratorDependency, LanguageMapping

logger = logging.getLogger(__name__)


class GeneratorResolver:
    """Resolves generic units against finalized generator declarations"""

    def index(self, dependencies: Iterable[GeneratorDependency]) -> Dict[str, GeneratorDependency]:
        """
        Map language identifier -> dependency

        Raises:
            MalformedGeneratorName: If any name lacks the reserved prefix
            AmbiguousGenerator: If two dependencies share a language
        """
        dependencies = list(dependencies)

        # Names are checked for every dependency before anything else
        languages = [naming.generator_language(dep.name, dep.coordinate) for dep in dependencies]

        generators: Dict[str, GeneratorDependency] = {}
        for language, dependency in zip(languages, dependencies):
            existing = generators.get(language)
            if existing is not None and existing != dependency:
                raise AmbiguousGenerator(language, [existing.coordinate, dependency.coordinate])
            generators[language] = dependency
        return generators

    def resolve(
        self,
        dependencies: Iterable[GeneratorDependency],
        generic_units: List[LanguageMapping],
    ) -> Dict[str, GeneratorDependency]:
        """
        Resolve each generic unit to its generator

        Args:
            dependencies: Finalized generator declarations
            generic_units: Discovered units that are not first-class

        Returns:
            Mapping of language identifier -> dependency, restricted to the generic units

        Raises:
            MalformedGeneratorName: If a declared name lacks the reserved prefix
            AmbiguousGenerator: If two dependencies share a language
            MissingGenerator: If a generic unit has no matching dependency
        """
        generators = self.index(dependencies)

        resolved: Dict[str, GeneratorDependency] = {}
        for mapping in generic_units:
            language = mapping.identifier
            if naming.is_first_class(language):
                continue
            if language not in generators:
                raise MissingGenerator(mapping.unit.name, naming.generator_dependency_name(language))
            resolved[language] = generators[language]
            logger.info(f"[Resolver] {mapping.unit.name} -> {generators[language].coordinate}")

        unused = sorted(set(generators) - set(resolved))
        if unused:
            logger.info(f"[Resolver] Declared generators without a matching unit: {', '.join(unused)}")
        return resolved


__all__ = ["GeneratorResolver"]
