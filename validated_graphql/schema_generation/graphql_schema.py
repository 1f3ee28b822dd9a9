# Copyright 2019-present Kensho Technologies, LLC.
import logging
from typing import Mapping, Optional

from graphql.type import GraphQLObjectType, GraphQLSchema, assert_valid_schema

from ..description import ValidationSchema, describe_schema
from ..exceptions import EmptySchemaError
from .graphql_types import get_graphql_fields
from .translation_context import TranslationContext


logger = logging.getLogger(__name__)

ROOT_QUERY_TYPE_NAME = "RootQueryType"
ROOT_MUTATION_TYPE_NAME = "RootMutationType"


def _get_root_type(
    context: TranslationContext, type_name: str, schemas: Mapping[str, ValidationSchema]
) -> GraphQLObjectType:
    """Return the root object type with one field per validation schema."""
    descriptions = {
        field_name: describe_schema(schema) for field_name, schema in schemas.items()
    }
    return GraphQLObjectType(type_name, get_graphql_fields(context, descriptions))


def get_graphql_schema(
    query: Optional[Mapping[str, ValidationSchema]] = None,
    mutation: Optional[Mapping[str, ValidationSchema]] = None,
    query_type_name: str = ROOT_QUERY_TYPE_NAME,
    mutation_type_name: str = ROOT_MUTATION_TYPE_NAME,
    validate: bool = True,
) -> GraphQLSchema:
    """Return a GraphQL schema whose root fields are described by the given validation schemas.

    Types are named after the "name" metadata of the validation schemas they come from.
    Every type name refers to a single GraphQL type within the returned schema, but type names
    are not shared between different calls to this function.

    Args:
        query: optional dict, field name -> validation schema, the fields of the query root type
        mutation: optional dict, field name -> validation schema, the fields of the mutation
                  root type
        query_type_name: str, name of the query root type
        mutation_type_name: str, name of the mutation root type
        validate: bool, whether to check the built schema against the GraphQL type system rules,
                  raising TypeError if it breaks any of them

    Returns:
        GraphQLSchema with a query root type, a mutation root type, or both, depending on which
        of the query and mutation field dicts were supplied

    Raises:
        EmptySchemaError: if neither query nor mutation fields were supplied
        SchemaGenerationError: if any validation schema cannot be represented in GraphQL
    """
    if query is None and mutation is None:
        raise EmptySchemaError(
            "Expected query fields, mutation fields or both in order to build a GraphQL "
            "schema, but received neither."
        )

    context = TranslationContext()
    query_type = None
    mutation_type = None
    if query is not None:
        query_type = _get_root_type(context, query_type_name, query)
    if mutation is not None:
        mutation_type = _get_root_type(context, mutation_type_name, mutation)

    schema = GraphQLSchema(query=query_type, mutation=mutation_type)
    if validate:
        assert_valid_schema(schema)

    logger.debug(
        "Built GraphQL schema with %d named types from validation schemas.",
        len(context.named_types),
    )
    return schema
