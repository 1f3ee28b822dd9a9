# Copyright 2017-present Kensho Technologies, LLC.
"""Introspectable form of a validation schema, as consumed by schema generation.

A validation schema describes itself as a tree of DescriptionNode objects. Schemas built with
this package's own builders (see schemas.py) produce nodes directly; other validation libraries
may produce the equivalent plain-dict form, which DescriptionNode.from_dict() understands:

    {
        "type": "object",
        "flags": {"presence": "required"},
        "rules": [{"name": "integer"}],
        "children": {"name": {...}},
        "items": [{...}],
        "alternatives": [{...}],
        "meta": [{"name": "User", "args": {...}, "resolve": f, "isTypeOf": g}],
        "description": "Some text.",
    }
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Protocol, Tuple, Union

import funcy

from .exceptions import UnsupportedDescriptionTypeError


class DescriptionType(Enum):
    """The kinds of description node that have a GraphQL representation."""

    BOOLEAN = "boolean"
    DATE = "date"
    STRING = "string"
    NUMBER = "number"
    OBJECT = "object"
    ARRAY = "array"
    ALTERNATIVES = "alternatives"


class Presence(Enum):
    """Presence flag of a description node."""

    REQUIRED = "required"
    OPTIONAL = "optional"
    FORBIDDEN = "forbidden"


class ValidationSchema(Protocol):
    """A validation schema that can describe itself and validate values."""

    def describe(self) -> Union["DescriptionNode", Mapping[str, Any]]:
        """Return the description of the schema."""

    def validate(self, value: Any) -> Any:
        """Return the validated and coerced value, raising ValueError if it is invalid."""


ArgumentsSchema = Mapping[str, ValidationSchema]


@dataclass(frozen=True)
class Rule:
    """A validation rule applied to a node, e.g. Rule("integer") or Rule("min", {"limit": 0})."""

    name: str
    args: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Metadata:
    """A metadata annotation attached to a description node."""

    name: Optional[str] = None
    args: Optional[ArgumentsSchema] = None
    resolve: Optional[Callable[..., Any]] = None
    is_type_of: Optional[Callable[[Any], bool]] = None


@dataclass(frozen=True)
class DescriptionNode:
    """A single node of a validation schema description tree."""

    type: DescriptionType
    presence: Optional[Presence] = None
    rules: Tuple[Rule, ...] = ()
    children: Optional[Mapping[str, "DescriptionNode"]] = None
    items: Tuple["DescriptionNode", ...] = ()
    alternatives: Tuple["DescriptionNode", ...] = ()
    metadata: Tuple[Metadata, ...] = ()
    description: Optional[str] = None

    @property
    def is_required(self) -> bool:
        return self.presence == Presence.REQUIRED

    @property
    def is_forbidden(self) -> bool:
        return self.presence == Presence.FORBIDDEN

    def has_rule(self, rule_name: str) -> bool:
        """Return True if any of the node's rules has the given name."""
        return any(rule.name == rule_name for rule in self.rules)

    def _first_metadata_value(self, attribute_name: str) -> Any:
        return funcy.first(
            value
            for value in (getattr(metadata, attribute_name) for metadata in self.metadata)
            if value is not None
        )

    @property
    def meta_name(self) -> Optional[str]:
        return self._first_metadata_value("name")

    @property
    def arguments_schema(self) -> Optional[ArgumentsSchema]:
        return self._first_metadata_value("args")

    @property
    def resolve(self) -> Optional[Callable[..., Any]]:
        return self._first_metadata_value("resolve")

    @property
    def is_type_of(self) -> Optional[Callable[[Any], bool]]:
        return self._first_metadata_value("is_type_of")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DescriptionNode":
        """Convert a plain-dict description, recursively, into a DescriptionNode.

        Args:
            data: dict in the format shown in this module's docstring

        Returns:
            DescriptionNode equivalent to the given dict

        Raises:
            UnsupportedDescriptionTypeError: if the dict, or any dict nested in it,
                                             has a type with no GraphQL representation
        """
        raw_type = data.get("type")
        try:
            node_type = DescriptionType(raw_type)
        except ValueError:
            raise UnsupportedDescriptionTypeError(
                'Description type "{}" is not supported. Supported types: {}'.format(
                    raw_type, [supported.value for supported in DescriptionType]
                )
            )

        raw_presence = (data.get("flags") or {}).get("presence")
        presence = Presence(raw_presence) if raw_presence is not None else None

        children = data.get("children")
        if children is not None:
            children = {
                child_name: cls.from_dict(child_data)
                for child_name, child_data in children.items()
            }

        return cls(
            type=node_type,
            presence=presence,
            rules=tuple(
                Rule(rule["name"], rule.get("args") or {}) for rule in data.get("rules") or ()
            ),
            children=children,
            items=tuple(cls.from_dict(item) for item in data.get("items") or ()),
            alternatives=tuple(
                cls.from_dict(alternative) for alternative in data.get("alternatives") or ()
            ),
            metadata=tuple(
                Metadata(
                    name=meta.get("name"),
                    args=meta.get("args"),
                    resolve=meta.get("resolve"),
                    is_type_of=meta.get("isTypeOf", meta.get("is_type_of")),
                )
                for meta in data.get("meta") or ()
            ),
            description=data.get("description"),
        )


def as_description_node(
    description: Union[DescriptionNode, Mapping[str, Any]]
) -> DescriptionNode:
    """Return the given description as a DescriptionNode, converting it from dict form if needed."""
    if isinstance(description, DescriptionNode):
        return description
    return DescriptionNode.from_dict(description)


def describe_schema(schema: ValidationSchema) -> DescriptionNode:
    """Describe the validation schema, returning its description as a DescriptionNode."""
    return as_description_node(schema.describe())
