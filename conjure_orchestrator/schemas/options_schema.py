"""
Options Schema - Generator option sets

Generator options are arbitrary key/value pairs handed to a generator
executable. A value of True renders as a bare flag.
"""
from typing import Any, Dict, List

from pydantic import BaseModel, Field, model_validator


class GeneratorOptions(BaseModel):
    """Options passed to a single generator invocation"""
    properties: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _accept_plain_mapping(cls, data: Any) -> Any:
        # Manifests spell options as a flat mapping
        if isinstance(data, dict) and set(data) != {"properties"}:
            return {"properties": data}
        return data

    def add_flag(self, flag: str) -> "GeneratorOptions":
        """Return a copy with `flag` enabled; the receiver is left untouched"""
        return self.set(flag, True)

    def set(self, key: str, value: Any) -> "GeneratorOptions":
        return GeneratorOptions(properties={**self.properties, key: value})

    def set_default(self, key: str, value: Any) -> "GeneratorOptions":
        if key in self.properties:
            return self
        return self.set(key, value)

    def get(self, key: str, default: Any = None) -> Any:
        return self.properties.get(key, default)

    def to_args(self) -> List[str]:
        """
        Render options as command-line arguments.

        True renders as '--key', False/None are omitted, anything else
        renders as '--key=value'. Keys are sorted so the rendering is stable.
        """
        args = []
        for key in sorted(self.properties):
            value = self.properties[key]
            if value is True:
                args.append(f"--{key}")
            elif value is False or value is None:
                continue
            else:
                args.append(f"--{key}={value}")
        return args


class ConjureOptions(BaseModel):
    """Per-target option sets declared on the root unit"""
    java: GeneratorOptions = Field(default_factory=GeneratorOptions)
    typescript: GeneratorOptions = Field(default_factory=GeneratorOptions)
    python: GeneratorOptions = Field(default_factory=GeneratorOptions)
    generic: Dict[str, GeneratorOptions] = Field(default_factory=dict, description="Options keyed by language")

    def for_generic(self, language: str) -> GeneratorOptions:
        return self.generic.get(language) or GeneratorOptions()

    def for_family(self, family: str) -> GeneratorOptions:
        if family == "java":
            return self.java
        if family == "typescript":
            return self.typescript
        if family == "python":
            return self.python
        raise ValueError(f"Unknown generator family: {family}")


__all__ = ["GeneratorOptions", "ConjureOptions"]
