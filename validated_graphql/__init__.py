# Copyright 2017-present Kensho Technologies, LLC.
"""Commonly-used functions and data types from this package."""
from .description import (  # noqa
    DescriptionNode,
    DescriptionType,
    Metadata,
    Presence,
    Rule,
    ValidationSchema,
    as_description_node,
)
from .exceptions import (  # noqa
    ArgumentValidationError,
    EmptyCompositeTypeError,
    EmptySchemaError,
    InvalidUnionMemberError,
    ResolutionError,
    SchemaGenerationError,
    TypeNameCollisionWarning,
    UnresolvedUnionMemberError,
    UnsupportedDescriptionTypeError,
)
from .schema_generation import get_graphql_schema  # noqa
from .schemas import Alternatives, Array, Boolean, Date, Number, Object, String  # noqa


__package_name__ = "validated-graphql"
__version__ = "1.0.0"
