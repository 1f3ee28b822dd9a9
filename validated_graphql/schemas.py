# Copyright 2017-present Kensho Technologies, LLC.
"""Immutable validation schema builders.

Each builder describes itself as a DescriptionNode tree (the input of schema generation) and
validates values by compiling itself to a pydantic type. Modifier methods never mutate the
schema they are called on, they return a modified copy:

    user = Object({
        "id": Number().integer().required(),
        "name": String(),
        "password": String().forbidden(),
    }).meta(name="User")
"""
import copy
from datetime import datetime
from functools import cached_property
from typing import Annotated, Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from ciso8601 import parse_datetime  # pylint: disable=no-name-in-module
import funcy
from pydantic import BeforeValidator, ConfigDict, Field, TypeAdapter, create_model

from .description import ArgumentsSchema, DescriptionNode, DescriptionType, Metadata, Presence, Rule


def _parse_iso8601_string(value: Any) -> Any:
    """Parse ISO-8601 strings into datetimes, leaving every other value for pydantic to check."""
    if isinstance(value, str):
        return parse_datetime(value)
    return value


def _union_of(annotations: List[Any]) -> Any:
    """Return the union of the given pydantic annotations, or Any if there are none."""
    if not annotations:
        return Any
    return Union[tuple(annotations)]


class BaseSchema(object):
    """Common behavior of all validation schema builders."""

    schema_type: DescriptionType

    def __init__(self) -> None:
        """Create a schema with no presence flag, rules, metadata or description."""
        self._presence: Optional[Presence] = None
        self._rules: Tuple[Rule, ...] = ()
        self._metadata: Tuple[Metadata, ...] = ()
        self._description: Optional[str] = None

    def _clone(self, **changes: Any) -> Any:
        """Return a copy of this schema, with the given private attributes replaced."""
        new_schema = copy.copy(self)
        # The compiled pydantic adapter is specific to the schema it was built for.
        new_schema.__dict__.pop("_type_adapter", None)
        for attribute_name, value in changes.items():
            setattr(new_schema, "_" + attribute_name, value)
        return new_schema

    def _with_rule(self, rule_name: str, **rule_args: Any) -> Any:
        return self._clone(rules=self._rules + (Rule(rule_name, rule_args),))

    @property
    def is_required(self) -> bool:
        return self._presence == Presence.REQUIRED

    @property
    def is_forbidden(self) -> bool:
        return self._presence == Presence.FORBIDDEN

    def required(self) -> Any:
        """Return a copy of the schema that requires a value to be present."""
        return self._clone(presence=Presence.REQUIRED)

    def optional(self) -> Any:
        """Return a copy of the schema that allows the value to be absent."""
        return self._clone(presence=Presence.OPTIONAL)

    def forbidden(self) -> Any:
        """Return a copy of the schema that rejects any value, and is hidden from GraphQL."""
        return self._clone(presence=Presence.FORBIDDEN)

    def description(self, text: str) -> Any:
        """Return a copy of the schema with the given description text."""
        return self._clone(description=text)

    def meta(
        self,
        name: Optional[str] = None,
        args: Optional[ArgumentsSchema] = None,
        resolve: Optional[Callable[..., Any]] = None,
        is_type_of: Optional[Callable[[Any], bool]] = None,
    ) -> Any:
        """Return a copy of the schema with an additional metadata annotation.

        Args:
            name: optional str, name of the GraphQL type generated for this schema
            args: optional dict, argument name -> validation schema, the arguments accepted by
                  the GraphQL field generated for this schema
            resolve: optional function used to resolve the GraphQL field generated for this
                     schema, called as resolve(source, info, **arguments)
            is_type_of: optional predicate deciding whether a value belongs to this schema's
                        type, when the schema is one of several members of a union

        Returns:
            a new schema of the same kind
        """
        metadata = Metadata(name=name, args=args, resolve=resolve, is_type_of=is_type_of)
        return self._clone(metadata=self._metadata + (metadata,))

    def _describe_nested(self) -> Dict[str, Any]:
        """Return the description fields specific to this schema kind."""
        return {}

    def describe(self) -> DescriptionNode:
        """Return the description of this schema."""
        return DescriptionNode(
            type=self.schema_type,
            presence=self._presence,
            rules=self._rules,
            metadata=self._metadata,
            description=self._description,
            **self._describe_nested()
        )

    def get_annotation(self) -> Any:
        """Return the pydantic type used to validate non-missing values of this schema."""
        raise NotImplementedError()

    @cached_property
    def _type_adapter(self) -> TypeAdapter:
        annotation = self.get_annotation()
        if not self.is_required:
            annotation = Optional[annotation]
        return TypeAdapter(annotation)

    def validate(self, value: Any) -> Any:
        """Validate the value, returning it coerced to the schema's types.

        Raises:
            ValueError: if the value is invalid; pydantic.ValidationError (a ValueError subclass)
                        describes every problem found within the value
        """
        if self.is_forbidden:
            if value is not None:
                raise ValueError("Value is forbidden, but got: {}".format(value))
            return None

        adapter = self._type_adapter
        return adapter.dump_python(
            adapter.validate_python(value), by_alias=True, exclude_unset=True
        )


class Boolean(BaseSchema):
    schema_type = DescriptionType.BOOLEAN

    def get_annotation(self) -> Any:
        return bool


class Date(BaseSchema):
    """A point in time, accepted as a datetime or an ISO-8601 string."""

    schema_type = DescriptionType.DATE

    def get_annotation(self) -> Any:
        return Annotated[datetime, BeforeValidator(_parse_iso8601_string)]


class String(BaseSchema):
    schema_type = DescriptionType.STRING

    def min(self, limit: int) -> "String":
        """Return a copy of the schema requiring at least `limit` characters."""
        return self._with_rule("min", limit=limit)

    def max(self, limit: int) -> "String":
        """Return a copy of the schema allowing at most `limit` characters."""
        return self._with_rule("max", limit=limit)

    def get_annotation(self) -> Any:
        constraints = {}
        for rule in self._rules:
            if rule.name == "min":
                constraints["min_length"] = rule.args["limit"]
            elif rule.name == "max":
                constraints["max_length"] = rule.args["limit"]
        if constraints:
            return Annotated[str, Field(**constraints)]
        return str


class Number(BaseSchema):
    schema_type = DescriptionType.NUMBER

    def integer(self) -> "Number":
        """Return a copy of the schema that only accepts whole numbers."""
        return self._with_rule("integer")

    def min(self, limit: float) -> "Number":
        return self._with_rule("min", limit=limit)

    def max(self, limit: float) -> "Number":
        return self._with_rule("max", limit=limit)

    def get_annotation(self) -> Any:
        base_type = int if self.describe().has_rule("integer") else float
        constraints = {}
        for rule in self._rules:
            if rule.name == "min":
                constraints["ge"] = rule.args["limit"]
            elif rule.name == "max":
                constraints["le"] = rule.args["limit"]
        if constraints:
            return Annotated[base_type, Field(**constraints)]
        return base_type


class Object(BaseSchema):
    """A mapping with known keys. Unknown and forbidden keys are rejected.

    An Object created without children accepts any mapping with string keys.
    """

    schema_type = DescriptionType.OBJECT

    def __init__(self, children: Optional[Mapping[str, BaseSchema]] = None) -> None:
        """Create an object schema with the given child schemas, keyed by property name."""
        super(Object, self).__init__()
        self._children = dict(children) if children is not None else None

    def keys(self, children: Mapping[str, BaseSchema]) -> "Object":
        """Return a copy of the schema with the given children added, replacing same-named ones."""
        new_children = dict(self._children or {})
        new_children.update(children)
        return self._clone(children=new_children)

    def _describe_nested(self) -> Dict[str, Any]:
        if self._children is None:
            return {}
        return {
            "children": {
                child_name: child.describe() for child_name, child in self._children.items()
            }
        }

    def get_annotation(self) -> Any:
        if self._children is None:
            return Dict[str, Any]

        # Child names are used as aliases only, since names such as "_id" or "model_config" are
        # not valid pydantic field names.
        model_fields = {}
        for index, (child_name, child) in enumerate(self._children.items()):
            if child.is_forbidden:
                # Left out of the model, so extra="forbid" rejects it.
                continue
            field_name = "child_{}".format(index)
            if child.is_required:
                model_fields[field_name] = (child.get_annotation(), Field(..., alias=child_name))
            else:
                model_fields[field_name] = (
                    Optional[child.get_annotation()],
                    Field(None, alias=child_name),
                )

        model_name = funcy.first(
            metadata.name for metadata in self._metadata if metadata.name is not None
        )
        return create_model(
            model_name or "Object", __config__=ConfigDict(extra="forbid"), **model_fields
        )


class Array(BaseSchema):
    """A list whose elements each match at least one of the item schemas."""

    schema_type = DescriptionType.ARRAY

    def __init__(self, *items: BaseSchema) -> None:
        """Create an array schema whose elements may match any of the given item schemas."""
        super(Array, self).__init__()
        self._items = tuple(items)

    def items(self, *items: BaseSchema) -> "Array":
        """Return a copy of the schema with additional allowed item schemas."""
        return self._clone(items=self._items + tuple(items))

    def _describe_nested(self) -> Dict[str, Any]:
        return {"items": tuple(item.describe() for item in self._items)}

    def get_annotation(self) -> Any:
        return List[
            _union_of([item.get_annotation() for item in self._items if not item.is_forbidden])
        ]


class Alternatives(BaseSchema):
    """A value matching at least one of several branch schemas."""

    schema_type = DescriptionType.ALTERNATIVES

    def __init__(self, *branches: BaseSchema) -> None:
        """Create an alternatives schema over the given branch schemas."""
        super(Alternatives, self).__init__()
        self._branches = tuple(branches)

    def try_(self, *branches: BaseSchema) -> "Alternatives":
        """Return a copy of the schema with additional branch schemas."""
        return self._clone(branches=self._branches + tuple(branches))

    def _describe_nested(self) -> Dict[str, Any]:
        return {"alternatives": tuple(branch.describe() for branch in self._branches)}

    def get_annotation(self) -> Any:
        return _union_of(
            [branch.get_annotation() for branch in self._branches if not branch.is_forbidden]
        )
