"""Pydantic models for YAML factory files.

A factory file declares named sequences and factories:

    models:
      - myapp.models
    sequences:
      email: "somebody{n}@example.com"
      ticket: {format: "T-{n}", start: 100}
    factories:
      user:
        class: User
        attributes:
          first_name: Jimi
          last_name: Hendrix
          email: {formula: "lower(first_name + '.' + last_name + '@example.com')"}
          username: {sequence: "username{n}"}
          contact: {next: email}
          settings: {value: {theme: dark}}
        after_stub: {first_name: Stubby}
      guest:
        parent: user
        attributes:
          last_name: Anonymous

Plain scalars, lists and dicts are static values. A dict whose keys are a
subset of the attribute-spec keys and include one kind key (value, formula,
sequence, next, association) is an attribute spec; wrap a literal dict that
looks like one in ``{value: ...}``.
"""

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..utils.eval_safe import validate_expression_syntax

StrategyName = Literal["attributes_for", "build", "create", "stub"]

KIND_KEYS = ("value", "formula", "sequence", "next", "association")
SPEC_KEYS = set(KIND_KEYS) | {"start", "strategy", "overrides"}


class SequenceSpec(BaseModel):
    """A named sequence: ``format`` uses ``{n}`` for the counter."""

    model_config = ConfigDict(extra="forbid")

    format: str | None = Field(
        default=None, description="str.format template with {n}; None yields the int"
    )
    start: int = Field(default=1, ge=0)


class AttributeSpec(BaseModel):
    """One attribute of a factory, exactly one kind key set."""

    model_config = ConfigDict(extra="forbid")

    value: Any = None
    formula: str | None = None
    sequence: str | None = Field(
        default=None, description="Inline sequence template with {n}"
    )
    start: int = Field(default=1, ge=0)
    next: str | None = Field(default=None, description="Named sequence to draw from")
    association: str | None = Field(default=None, description="Factory to run")
    strategy: StrategyName | None = None
    overrides: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _exactly_one_kind(self) -> "AttributeSpec":
        kinds = [key for key in KIND_KEYS if key in self.model_fields_set]
        if len(kinds) != 1:
            raise ValueError(
                f"attribute needs exactly one of {', '.join(KIND_KEYS)}; got {kinds or 'none'}"
            )
        if self.kind != "association" and (
            "strategy" in self.model_fields_set or "overrides" in self.model_fields_set
        ):
            raise ValueError("strategy/overrides only apply to associations")
        if self.kind == "formula":
            error = validate_expression_syntax(self.formula or "")
            if error:
                raise ValueError(f"invalid formula {self.formula!r}: {error}")
        return self

    @property
    def kind(self) -> str:
        for key in KIND_KEYS:
            if key in self.model_fields_set:
                return key
        return "value"


def _looks_like_spec(raw: Any) -> bool:
    return (
        isinstance(raw, dict)
        and bool(raw)
        and set(raw) <= SPEC_KEYS
        and any(key in raw for key in KIND_KEYS)
    )


class FactorySpec(BaseModel):
    """One factory: target class, parent, attributes and callback assignments."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    class_: str | None = Field(default=None, alias="class")
    parent: str | None = None
    default_strategy: StrategyName | None = None
    attributes: dict[str, AttributeSpec] = Field(default_factory=dict)
    after_build: dict[str, Any] = Field(default_factory=dict)
    after_create: dict[str, Any] = Field(default_factory=dict)
    after_stub: dict[str, Any] = Field(default_factory=dict)

    @field_validator("attributes", mode="before")
    @classmethod
    def _wrap_static_values(cls, raw: Any) -> Any:
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            return raw
        return {
            name: value if _looks_like_spec(value) else {"value": value}
            for name, value in raw.items()
        }


class FactoryFile(BaseModel):
    """A YAML file of sequences and factories."""

    model_config = ConfigDict(extra="forbid")

    models: list[str] = Field(
        default_factory=list, description="Modules whose classes factories may target"
    )
    sequences: dict[str, SequenceSpec] = Field(default_factory=dict)
    factories: dict[str, FactorySpec] = Field(default_factory=dict)

    @field_validator("sequences", mode="before")
    @classmethod
    def _expand_sequence_shorthand(cls, raw: Any) -> Any:
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            return raw
        return {
            name: {"format": value} if isinstance(value, str) or value is None else value
            for name, value in raw.items()
        }

    @field_validator("factories", mode="before")
    @classmethod
    def _empty_factories(cls, raw: Any) -> Any:
        if raw is None:
            return {}
        if isinstance(raw, dict):
            return {name: spec or {} for name, spec in raw.items()}
        return raw

    def to_yaml(self, path: Path | str) -> None:
        """Save the file to YAML."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = self.model_dump(mode="json", by_alias=True, exclude_unset=True)

        with open(path, "w") as f:
            yaml.dump(
                data, f, default_flow_style=False, sort_keys=False, allow_unicode=True
            )

    @classmethod
    def from_yaml(cls, path: Path | str) -> "FactoryFile":
        """Load a factory file from YAML."""
        path = Path(path)

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.model_validate(data or {})
