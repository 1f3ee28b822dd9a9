# Copyright 2017-present Kensho Technologies, LLC.
from typing import Mapping


class SchemaGenerationError(Exception):
    """Base class for all errors raised while building a GraphQL schema from descriptions."""


class UnsupportedDescriptionTypeError(SchemaGenerationError):
    """Raised when a description node has a type that cannot be represented in GraphQL.

    Building stops on the first such node: a partially-built schema is never returned.
    """


class EmptyCompositeTypeError(SchemaGenerationError):
    """Raised when an array or alternatives node has no non-forbidden candidates left."""


class InvalidUnionMemberError(SchemaGenerationError):
    """Raised when a union member candidate does not translate to a GraphQL object type.

    GraphQL unions may only contain object types, so e.g. an output-position array whose
    items are a string and a number cannot be represented.
    """


class EmptySchemaError(SchemaGenerationError):
    """Raised when neither query nor mutation fields were supplied."""


class ResolutionError(Exception):
    """Base class for errors raised while resolving fields of a generated schema."""


class ArgumentValidationError(ResolutionError):
    """Raised when field arguments fail validation against the field's arguments schema.

    Attributes:
        field_name: str, name of the field whose arguments were rejected
        errors: dict, argument name -> human-readable description of what was wrong with it
    """

    def __init__(self, field_name: str, errors: Mapping[str, str]) -> None:
        """Create the error, rendering the per-argument messages into the exception message."""
        self.field_name = field_name
        self.errors = dict(errors)
        details = "; ".join(
            "{}: {}".format(argument_name, message)
            for argument_name, message in sorted(self.errors.items())
        )
        super(ArgumentValidationError, self).__init__(
            'Invalid arguments for field "{}": {}'.format(field_name, details)
        )


class UnresolvedUnionMemberError(ResolutionError):
    """Raised when a value does not match any member of a generated union type."""


class TypeNameCollisionWarning(UserWarning):
    """Emitted when two different descriptions produce the same GraphQL type name.

    The first-built type is reused for both, so the second description is not represented.
    """
