"""
Tests for naming conventions

Unit names, generator names and task names.
"""
import pytest

from conjure_orchestrator.core import naming
from conjure_orchestrator.errors import InvalidCoordinate, InvalidTopology, MalformedGeneratorName
from conjure_orchestrator.schemas.project_schema import GeneratorDependency, TargetKind


class TestDeriveLanguage:
    """Test '<root>-<suffix>' -> identifier"""

    def test_strips_root_prefix(self):
        assert naming.derive_language("foo", "foo-objects") == "objects"
        assert naming.derive_language("foo", "foo-rust") == "rust"

    def test_keeps_dashes_in_suffix(self):
        assert naming.derive_language("foo", "foo-my-lang") == "my-lang"

    def test_root_with_dashes(self):
        assert naming.derive_language("foo-api", "foo-api-jersey") == "jersey"

    def test_unrelated_unit_is_invalid(self):
        with pytest.raises(InvalidTopology) as exc:
            naming.derive_language("foo", "bar-objects")
        assert exc.value.root_name == "foo"
        assert exc.value.unit_name == "bar-objects"

    def test_empty_suffix_is_invalid(self):
        with pytest.raises(InvalidTopology):
            naming.derive_language("foo", "foo-")


class TestFirstClass:
    """Test the fixed set of first-class identifiers"""

    @pytest.mark.parametrize(
        "identifier",
        ["objects", "jersey", "retrofit", "undertow", "dialogue", "typescript", "python"],
    )
    def test_first_class(self, identifier):
        assert naming.is_first_class(identifier)
        assert naming.first_class_kind(identifier) == TargetKind(identifier)

    @pytest.mark.parametrize("identifier", ["rust", "go", "Objects", "objects2", ""])
    def test_generic(self, identifier):
        assert not naming.is_first_class(identifier)
        assert naming.first_class_kind(identifier) is None

    def test_sibling_name(self):
        assert naming.sibling_name("foo", TargetKind.OBJECTS) == "foo-objects"


class TestGeneratorNames:
    """Test the reserved 'conjure-' prefix"""

    def test_language_from_dependency_name(self):
        assert naming.generator_language("conjure-rust") == "rust"
        assert naming.generator_dependency_name("rust") == "conjure-rust"

    def test_missing_prefix_is_malformed(self):
        with pytest.raises(MalformedGeneratorName) as exc:
            naming.generator_language("bad-name-objects", "com.example:bad-name-objects:1.0.0")

        assert exc.value.name == "bad-name-objects"
        assert exc.value.prefix == "conjure-"
        assert "bad-name-objects" in str(exc.value)

    def test_bare_prefix_is_malformed(self):
        with pytest.raises(MalformedGeneratorName):
            naming.generator_language("conjure-")


class TestTaskNames:
    """Test lower camel case task naming"""

    def test_lower_camel_case(self):
        assert naming.to_lower_camel_case("compile conjure rust") == "compileConjureRust"
        assert naming.to_lower_camel_case("extractConjure rust") == "extractConjureRust"
        assert naming.to_lower_camel_case("gitignore conjure my-lang") == "gitignoreConjureMyLang"

    def test_clean_task_name(self):
        assert naming.clean_task_name("compileConjureObjects") == "cleanCompileConjureObjects"


class TestGeneratorDependency:
    """Test coordinate parsing"""

    def test_parse_full_coordinate(self):
        dep = GeneratorDependency.parse("com.example:conjure-rust:1.0.0")

        assert dep.group == "com.example"
        assert dep.name == "conjure-rust"
        assert dep.version == "1.0.0"
        assert dep.extension is None
        assert dep.coordinate == "com.example:conjure-rust:1.0.0"

    def test_parse_extension(self):
        dep = GeneratorDependency.parse("com.palantir.conjure.typescript:conjure-typescript@tgz")

        assert dep.version is None
        assert dep.extension == "tgz"
        assert dep.with_version("5.6.0").coordinate == (
            "com.palantir.conjure.typescript:conjure-typescript:5.6.0@tgz"
        )

    def test_parse_too_many_parts(self):
        with pytest.raises(InvalidCoordinate) as exc_info:
            GeneratorDependency.parse("a:conjure-rust:1:2")

        assert exc_info.value.coordinate == "a:conjure-rust:1:2"

    def test_parse_empty_name(self):
        with pytest.raises(InvalidCoordinate):
            GeneratorDependency.parse("com.example::1.0.0")

    def test_parse_bare_name(self):
        dep = GeneratorDependency.parse("conjure-rust")

        assert dep.group == ""
        assert dep.name == "conjure-rust"
        assert dep.version is None
