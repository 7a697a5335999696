"""
Unit Wiring - per-target rules

Each first-class target is described by a TargetProfile: which sibling it
needs, which libraries it adds, where it generates to, and which
post-generation steps follow. A single function wires any profile, so the
per-target differences live in the PROFILES table rather than in code.

Generic targets get the same skeleton with no sibling requirement and no
library additions.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple

from conjure_orchestrator.config import (
    ANNOTATION_API,
    CONJURE_JAVA_BINARY,
    CONJURE_JAVA_LIB_DEP,
    CONJURE_PYTHON_BINARY,
    CONJURE_TYPESCRIPT_BINARY,
    JAVA_GENERATED_SOURCE_DIRNAME,
    JAVA_GITIGNORE_CONTENTS,
    NPM_COMMAND,
    PYTHON_COMMAND,
)
from conjure_orchestrator.core import naming
from conjure_orchestrator.core.graph_builder import TaskGraphBuilder
from conjure_orchestrator.core.integrations import UnitIntegrations
from conjure_orchestrator.errors import MissingSibling
from conjure_orchestrator.schemas.options_schema import ConjureOptions, GeneratorOptions
from conjure_orchestrator.schemas.project_schema import (
    BuildUnit,
    GeneratorDependency,
    LanguageMapping,
    TargetKind,
)
from conjure_orchestrator.schemas.task_schema import WorkItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutableFamily:
    """A generator executable shared by one or more targets"""
    family: str
    extract_task: str
    coordinate: str
    dirname: str
    executable_name: str


FAMILIES: Dict[str, ExecutableFamily] = {
    "java": ExecutableFamily("java", "extractConjureJava", CONJURE_JAVA_BINARY, "conjureJava", "conjure-java"),
    "typescript": ExecutableFamily(
        "typescript", "extractConjureTypeScript", CONJURE_TYPESCRIPT_BINARY, "conjureTypeScript", "conjure-typescript"
    ),
    "python": ExecutableFamily(
        "python", "extractConjurePython", CONJURE_PYTHON_BINARY, "conjurePython", "conjure-python"
    ),
}


@dataclass(frozen=True)
class PostStep:
    """
    A subprocess run after generation, in the generated output directory.

    Command and path entries may use {npm}, {python}, {build_dir} and
    {dist_dir} placeholders.
    """
    task_name: str
    description: str
    command: Tuple[str, ...]
    inputs: Tuple[Tuple[str, str], ...] = ()
    outputs: Tuple[Tuple[str, str], ...] = ()
    publish: bool = False


@dataclass(frozen=True)
class TargetProfile:
    kind: TargetKind
    family: str
    task_name: str
    description: str
    output_subdir: str
    gitignore_task: str
    gitignore_contents: str
    flag: Optional[str] = None
    requires_objects: bool = False
    depends_on_objects: bool = False
    libraries: Tuple[Tuple[str, str], ...] = ()
    unit_compile_task: Optional[str] = None
    package_defaults: bool = False
    consumes_service_dependencies: bool = False
    post_steps: Tuple[PostStep, ...] = ()


JAVA_LINT_IGNORES = (CONJURE_JAVA_LIB_DEP, "com.google.guava:guava")


def _java_profile(kind: TargetKind, description: str, libraries=(), requires_objects=True) -> TargetProfile:
    return TargetProfile(
        kind=kind,
        family="java",
        task_name="compileConjure" + naming.capitalize(kind.value),
        description=description,
        output_subdir=JAVA_GENERATED_SOURCE_DIRNAME,
        gitignore_task="gitignoreConjure" + naming.capitalize(kind.value),
        gitignore_contents=JAVA_GITIGNORE_CONTENTS,
        flag=kind.value,
        requires_objects=requires_objects,
        depends_on_objects=requires_objects,
        libraries=tuple(libraries),
        unit_compile_task="compileJava",
    )


PROFILES: Dict[TargetKind, TargetProfile] = {
    TargetKind.OBJECTS: _java_profile(
        TargetKind.OBJECTS,
        "Generates Java POJOs from your Conjure definitions.",
        libraries=[("api", CONJURE_JAVA_LIB_DEP)],
        requires_objects=False,
    ),
    TargetKind.JERSEY: _java_profile(
        TargetKind.JERSEY,
        "Generates Jersey interfaces from your Conjure definitions "
        "(for use on both the client-side and server-side).",
        libraries=[("api", "jakarta.ws.rs:jakarta.ws.rs-api"), ("compileOnly", ANNOTATION_API)],
    ),
    TargetKind.RETROFIT: _java_profile(
        TargetKind.RETROFIT,
        "Generates Retrofit interfaces for use on the client-side from your Conjure definitions.",
        libraries=[
            ("api", "com.google.guava:guava"),
            ("api", "com.squareup.retrofit2:retrofit"),
            ("compileOnly", ANNOTATION_API),
        ],
    ),
    TargetKind.UNDERTOW: _java_profile(
        TargetKind.UNDERTOW,
        "Generates Undertow server interfaces and handlers from your Conjure definitions.",
        libraries=[("api", "com.palantir.conjure.java:conjure-undertow-lib")],
    ),
    TargetKind.DIALOGUE: _java_profile(
        TargetKind.DIALOGUE,
        "Generates Dialogue client interfaces from your Conjure definitions.",
        libraries=[("api", "com.palantir.dialogue:dialogue-target")],
    ),
    TargetKind.TYPESCRIPT: TargetProfile(
        kind=TargetKind.TYPESCRIPT,
        family="typescript",
        task_name="compileConjureTypeScript",
        description="Generates TypeScript files and a package.json from your Conjure definitions.",
        output_subdir="src",
        gitignore_task="gitignoreConjureTypeScript",
        gitignore_contents="/src/\n",
        package_defaults=True,
        consumes_service_dependencies=True,
        post_steps=(
            PostStep(
                task_name="installTypeScriptDependencies",
                description="Runs `npm install` for the generated TypeScript package.",
                command=("{npm}", "install", "--no-package-lock", "--no-production"),
                inputs=(("package_json", "package.json"),),
                outputs=(("output_dir", "node_modules"),),
            ),
            PostStep(
                task_name="compileTypeScript",
                description="Runs `npm tsc` to compile generated TypeScript files into JavaScript files.",
                command=("{npm}", "run-script", "build"),
            ),
            PostStep(
                task_name="publishTypeScript",
                description="Runs `npm publish` to publish a TypeScript package generated from your "
                            "Conjure definitions.",
                command=("{npm}", "publish"),
                publish=True,
            ),
        ),
    ),
    TargetKind.PYTHON: TargetProfile(
        kind=TargetKind.PYTHON,
        family="python",
        task_name="compileConjurePython",
        description="Generates Python files from your Conjure definitions.",
        output_subdir="python",
        gitignore_task="gitignoreConjurePython",
        gitignore_contents="/python/\n",
        package_defaults=True,
        post_steps=(
            PostStep(
                task_name="buildWheel",
                description="Runs `python setup.py sdist bdist_wheel --universal` to build a python wheel "
                            "generated from your Conjure definitions.",
                command=(
                    "{python}", "setup.py",
                    "build", "--build-base", "{build_dir}",
                    "egg_info", "--egg-base", "{build_dir}",
                    "sdist", "--dist-dir", "{dist_dir}",
                    "bdist_wheel", "--universal", "--dist-dir", "{dist_dir}",
                ),
                outputs=(("dist_dir", "{dist_dir}"),),
            ),
        ),
    ),
}


class WiringContext:
    """Everything shared by the wiring of every unit under one root"""

    def __init__(
        self,
        builder: TaskGraphBuilder,
        compiled_ir: WorkItem,
        options: ConjureOptions,
        service_dependencies: Optional[WorkItem] = None,
    ):
        self.builder = builder
        self.compiled_ir = compiled_ir
        self.options = options
        self.service_dependencies = service_dependencies

    @property
    def root(self) -> BuildUnit:
        return self.builder.root

    def family_extraction(self, family: str) -> WorkItem:
        executable = FAMILIES[family]
        return self.builder.build_extraction(
            executable.extract_task,
            self.builder.resolve_coordinate(executable.coordinate),
            self.root.build_dir / executable.dirname,
            executable.executable_name,
        )


def check_siblings(root: BuildUnit, first_class: Dict[TargetKind, LanguageMapping]):
    """
    Every target that needs a sibling objects unit must find one.

    Raises:
        MissingSibling: Naming the first offending unit (in profile order) and the missing sibling
    """
    objects_name = naming.sibling_name(root.name, TargetKind.OBJECTS)
    for kind, profile in PROFILES.items():
        if kind not in first_class or not profile.requires_objects:
            continue
        if root.find_child(objects_name) is None:
            raise MissingSibling(first_class[kind].unit.name, objects_name)


def _render(template: str, values: Dict[str, str]) -> str:
    return template.format(**values)


def wire_first_class(
    context: WiringContext,
    mapping: LanguageMapping,
    integrations: UnitIntegrations,
) -> WorkItem:
    """Wire one first-class unit according to its profile; returns its generation step"""
    profile = PROFILES[mapping.kind]
    builder = context.builder
    root = context.root
    unit = mapping.unit

    options = context.options.for_family(profile.family)
    if profile.flag:
        options = options.add_flag(profile.flag)
    if profile.package_defaults:
        options = options.set_default("packageName", unit.name)
        if root.version:
            options = options.set_default("packageVersion", root.version)

    output_dir = unit.file(profile.output_subdir)
    generator = context.family_extraction(profile.family)

    extra_parameters = {}
    if profile.consumes_service_dependencies and context.service_dependencies is not None:
        extra_parameters["extra_args"] = [
            f"--productDependencies={context.service_dependencies.outputs['output_file']}"
        ]

    generation = builder.build_generation_step(
        profile.task_name,
        profile.kind.value,
        context.compiled_ir,
        generator,
        output_dir,
        options,
        description=profile.description,
        extra_parameters=extra_parameters,
    )
    if "extra_args" in extra_parameters:
        generation.depends_on(context.service_dependencies.name)

    gitignore = builder.build_gitignore(unit, profile.gitignore_task, profile.gitignore_contents)
    generation.depends_on(gitignore.name)
    builder.wire_cleanup(generation, output_dir)
    builder.wire_generic_owner(builder.generate_all, generation)
    integrations.register_generation(builder.graph, generation.name, output_dir)

    # Library wiring
    if profile.family == "java":
        unit.capabilities.add("java-library")
        unit.add_source_dir(output_dir)
        integrations.dependency_lint.ignore(builder.graph, JAVA_LINT_IGNORES)
    objects_unit = root.find_child(naming.sibling_name(root.name, TargetKind.OBJECTS))
    if profile.depends_on_objects and objects_unit is not None:
        unit.add_dependency("api", objects_unit.path, project=True)
    for configuration, notation in profile.libraries:
        unit.add_dependency(configuration, notation)

    # The unit's own compilation reads the generated sources
    if profile.unit_compile_task:
        compile_task = builder.ensure_task(unit, profile.unit_compile_task)
        compile_task.depends_on(generation.name)
        if profile.depends_on_objects and objects_unit is not None:
            compile_task.depends_on(builder.ensure_task(objects_unit, profile.unit_compile_task).name)

    _wire_post_steps(builder, profile, unit, output_dir, generation)

    logger.info(f"[Wiring] {unit.name}: {generation.name} -> {output_dir}")
    return generation


def _wire_post_steps(
    builder: TaskGraphBuilder,
    profile: TargetProfile,
    unit: BuildUnit,
    working_dir: Path,
    generation: WorkItem,
):
    if not profile.post_steps:
        return

    build_dir = builder.root.build_dir / profile.family
    values = {
        "npm": NPM_COMMAND,
        "python": PYTHON_COMMAND,
        "build_dir": str(build_dir),
        "dist_dir": str(build_dir / "dist"),
    }

    def resolve(template: str) -> str:
        # Placeholders already expand to full paths
        if "{" in template:
            return _render(template, values)
        return str(working_dir / template)

    previous = generation
    for step in profile.post_steps:
        task = builder.build_command(
            step.task_name,
            [_render(part, values) for part in step.command],
            working_dir,
            description=step.description,
            inputs={key: resolve(path) for key, path in step.inputs},
            outputs={key: resolve(path) for key, path in step.outputs},
        )
        task.depends_on(generation.name, previous.name)
        if step.publish:
            publish = builder.find_task(unit, "publish")
            if publish is not None:
                publish.depends_on(task.name)
        previous = task


def wire_generic(
    context: WiringContext,
    mapping: LanguageMapping,
    dependency: GeneratorDependency,
) -> WorkItem:
    """Extract the matching generator and generate into the unit's 'src' directory"""
    builder = context.builder
    unit = mapping.unit
    language = mapping.identifier

    generator = builder.build_extraction(
        naming.to_lower_camel_case("extractConjure " + language),
        dependency,
        unit.build_dir / "generator",
        dependency.name,
    )
    output_dir = unit.file("src")
    options: GeneratorOptions = context.options.for_generic(language)

    generation = builder.build_generation_step(
        naming.to_lower_camel_case("compile conjure " + language),
        language,
        context.compiled_ir,
        generator,
        output_dir,
        options,
        description=f"Generates {language} files from your Conjure definition.",
    )
    gitignore = builder.build_gitignore(
        unit, naming.to_lower_camel_case("gitignore conjure " + language), "/src/\n"
    )
    generation.depends_on(gitignore.name)
    builder.wire_cleanup(generation, output_dir)
    builder.wire_generic_owner(builder.generate_all, generation)

    logger.info(f"[Wiring] {unit.name}: {generation.name} via {dependency.coordinate}")
    return generation


__all__ = [
    "ExecutableFamily",
    "FAMILIES",
    "PostStep",
    "TargetProfile",
    "PROFILES",
    "WiringContext",
    "check_siblings",
    "wire_first_class",
    "wire_generic",
]
