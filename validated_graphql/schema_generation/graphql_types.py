# Copyright 2019-present Kensho Technologies, LLC.
"""Translation of validation schema descriptions into GraphQL types and fields."""
import logging
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Set

from graphql.type import (
    GraphQLArgument,
    GraphQLBoolean,
    GraphQLField,
    GraphQLFloat,
    GraphQLInputField,
    GraphQLInputObjectType,
    GraphQLInt,
    GraphQLList,
    GraphQLNamedType,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLResolveInfo,
    GraphQLString,
    GraphQLType,
    GraphQLUnionType,
)

from ..description import DescriptionNode, DescriptionType, describe_schema
from ..exceptions import (
    EmptyCompositeTypeError,
    InvalidUnionMemberError,
    UnresolvedUnionMemberError,
    UnsupportedDescriptionTypeError,
)
from .resolvers import make_validated_resolver
from .translation_context import TranslationContext


logger = logging.getLogger(__name__)

INPUT_TYPE_NAME_PREFIX = "Input"
COMPOSITE_TYPE_NAME_SEPARATOR = "Or"
INTEGER_RULE_NAME = "integer"


def translate_description(
    context: TranslationContext, description: DescriptionNode, is_input: bool
) -> GraphQLType:
    """Return the GraphQL type representing values described by the given description.

    Args:
        context: TranslationContext of the schema build, holding the named types built so far
        description: DescriptionNode to translate
        is_input: bool, True if the type is used as an argument or input object field type,
                  False if it is used as the type of an output field

    Returns:
        GraphQL type for the description. Required descriptions are wrapped in GraphQLNonNull
        in input position only.

    Raises:
        UnsupportedDescriptionTypeError: if the description, or any description nested in it,
                                         has a type with no GraphQL representation
    """
    node_type = description.type
    if node_type == DescriptionType.BOOLEAN:
        graphql_type: GraphQLType = GraphQLBoolean
    elif node_type in (DescriptionType.DATE, DescriptionType.STRING):
        graphql_type = GraphQLString
    elif node_type == DescriptionType.NUMBER:
        graphql_type = GraphQLInt if description.has_rule(INTEGER_RULE_NAME) else GraphQLFloat
    elif node_type == DescriptionType.OBJECT:
        graphql_type = _get_object_type(context, description, is_input)
    elif node_type == DescriptionType.ARRAY:
        graphql_type = _get_array_type(context, description, is_input)
    elif node_type == DescriptionType.ALTERNATIVES:
        graphql_type = _get_alternatives_type(context, description, is_input)
    else:
        raise UnsupportedDescriptionTypeError(
            "Description type {} is not supported. Description: {}".format(node_type, description)
        )

    if is_input and description.is_required:
        return GraphQLNonNull(graphql_type)
    return graphql_type


def _get_type_name_prefix(is_input: bool) -> str:
    return INPUT_TYPE_NAME_PREFIX if is_input else ""


def _get_object_type(
    context: TranslationContext, description: DescriptionNode, is_input: bool
) -> GraphQLNamedType:
    """Return the object or input object type for an object description, building it if needed."""
    type_name = _get_type_name_prefix(is_input) + (
        description.meta_name or context.get_anonymous_type_name()
    )
    # Field-level metadata, e.g. arguments or resolvers, does not change the type itself.
    type_source = description.children
    cached_type = context.get_cached_type(type_name, type_source)
    if cached_type is not None:
        return cached_type

    children = description.children or {}
    graphql_type: GraphQLNamedType
    if is_input:
        graphql_type = GraphQLInputObjectType(
            type_name,
            get_graphql_input_fields(context, children),
            description=description.description,
        )
    else:
        graphql_type = GraphQLObjectType(
            type_name, get_graphql_fields(context, children), description=description.description
        )
    return context.register_type(type_name, graphql_type, type_source)


def _get_array_type(
    context: TranslationContext, description: DescriptionNode, is_input: bool
) -> GraphQLList:
    """Return the list type for an array description."""
    items = [item for item in description.items if not item.is_forbidden]
    if len(items) == 1:
        # A single item kind needs no composite type: the list holds that item's type directly.
        return GraphQLList(translate_description(context, items[0], is_input))
    return GraphQLList(_get_composite_type(context, description, items, is_input))


def _get_alternatives_type(
    context: TranslationContext, description: DescriptionNode, is_input: bool
) -> GraphQLType:
    """Return the type for an alternatives description. Unlike arrays, it is not list-wrapped."""
    branches = [branch for branch in description.alternatives if not branch.is_forbidden]
    if len(branches) == 1:
        # A one-branch composite would take the branch's own type name.
        return translate_description(context, branches[0], is_input)
    return _get_composite_type(context, description, branches, is_input)


def get_composite_type_name(candidates: Sequence[DescriptionNode], is_input: bool) -> str:
    """Return the name of the composite type of the given candidates, e.g. "UserOrGroup"."""
    prefix = _get_type_name_prefix(is_input)
    return COMPOSITE_TYPE_NAME_SEPARATOR.join(
        prefix + (candidate.meta_name or candidate.type.value).capitalize()
        for candidate in candidates
    )


def _get_composite_type(
    context: TranslationContext,
    description: DescriptionNode,
    candidates: Sequence[DescriptionNode],
    is_input: bool,
) -> GraphQLNamedType:
    """Return the type merging or discriminating between the candidates, building it if needed.

    In input position, the fields of all candidates are merged into a single input object type,
    with later candidates' fields replacing earlier same-named ones. In output position, the
    candidates become the members of a union type whose members are told apart at runtime.

    Args:
        context: TranslationContext of the schema build
        description: DescriptionNode of the array or alternatives node owning the candidates
        candidates: non-forbidden item or branch descriptions, in declaration order
        is_input: bool, whether the type is used in input position

    Returns:
        GraphQLInputObjectType in input position, GraphQLUnionType in output position
    """
    if not candidates:
        raise EmptyCompositeTypeError(
            "Expected at least one non-forbidden item or alternative in order to build a "
            "GraphQL type, but found none. Description: {}".format(description)
        )

    type_name = get_composite_type_name(candidates, is_input)
    type_source = tuple(candidates)
    cached_type = context.get_cached_type(type_name, type_source)
    if cached_type is not None:
        return cached_type

    composite_type: GraphQLNamedType
    if is_input:
        merged_children: Dict[str, DescriptionNode] = {}
        for candidate in candidates:
            merged_children.update(candidate.children or {})
        input_fields = get_graphql_input_fields(context, merged_children)
        if not input_fields:
            raise EmptyCompositeTypeError(
                'Cannot build input type "{}": none of its candidates has any non-forbidden '
                "object fields to merge. Description: {}".format(type_name, description)
            )
        composite_type = GraphQLInputObjectType(
            type_name, input_fields, description=description.description
        )
    else:
        member_types = []
        for candidate in candidates:
            member_type = translate_description(context, candidate, False)
            if not isinstance(member_type, GraphQLObjectType):
                raise InvalidUnionMemberError(
                    'Union type "{}" can only contain object types, but one of its candidates '
                    "is represented by {}. Description: {}".format(
                        type_name, member_type, candidate
                    )
                )
            member_types.append(member_type)
        composite_type = GraphQLUnionType(
            type_name,
            member_types,
            resolve_type=_create_member_type_resolver(type_name, candidates, member_types),
            description=description.description,
        )

    return context.register_type(type_name, composite_type, type_source)


def _get_value_keys(value: Any) -> Optional[Set[str]]:
    """Return the keys of a mapping, or the attribute names of an object, or None if neither."""
    if isinstance(value, Mapping):
        return set(value.keys())
    try:
        return set(vars(value))
    except TypeError:
        return None


def _value_matches_candidate(value: Any, candidate: DescriptionNode) -> bool:
    """Return True if the value belongs to the type of the given union member candidate."""
    is_type_of = candidate.is_type_of
    if is_type_of is not None:
        return bool(is_type_of(value))

    # The key set includes forbidden children.
    return _get_value_keys(value) == set(candidate.children or {})


def _create_member_type_resolver(
    union_name: str,
    candidates: Sequence[DescriptionNode],
    member_types: Sequence[GraphQLObjectType],
) -> Callable[[Any, GraphQLResolveInfo, GraphQLUnionType], str]:
    """Return a function that picks the union member type of a value being resolved.

    The first candidate, in declaration order, whose is_type_of predicate accepts the value is
    picked. Candidates without a predicate match values with exactly the candidate's keys.
    """
    candidates_and_types = list(zip(candidates, member_types))

    def resolve_member_type(
        value: Any, info: GraphQLResolveInfo, abstract_type: GraphQLUnionType
    ) -> str:
        """Return the name of the union member type the value belongs to."""
        for candidate, member_type in candidates_and_types:
            if _value_matches_candidate(value, candidate):
                return member_type.name
        raise UnresolvedUnionMemberError(
            'Value {} does not match any member of union type "{}". Member types: {}'.format(
                value, union_name, [member_type.name for member_type in member_types]
            )
        )

    return resolve_member_type


def get_graphql_arguments(
    context: TranslationContext, description: DescriptionNode
) -> Optional[Dict[str, GraphQLArgument]]:
    """Return the GraphQL arguments of the field described by the given description.

    Returns:
        None if the description carries no arguments schema. Otherwise, a dict mapping the name
        of each non-forbidden argument to its GraphQLArgument, typed in input position.
    """
    arguments_schema = description.arguments_schema
    if arguments_schema is None:
        return None

    arguments = {}
    for argument_name, argument_schema in arguments_schema.items():
        argument_description = describe_schema(argument_schema)
        if argument_description.is_forbidden:
            continue
        arguments[argument_name] = GraphQLArgument(
            translate_description(context, argument_description, True),
            description=argument_description.description,
        )
    return arguments


def get_graphql_input_fields(
    context: TranslationContext, descriptions: Mapping[str, DescriptionNode]
) -> Dict[str, GraphQLInputField]:
    """Return the input object fields for the given field descriptions, omitting forbidden ones."""
    return {
        field_name: GraphQLInputField(
            translate_description(context, field_description, True),
            description=field_description.description,
        )
        for field_name, field_description in descriptions.items()
        if not field_description.is_forbidden
    }


def get_graphql_fields(
    context: TranslationContext, descriptions: Mapping[str, DescriptionNode]
) -> Dict[str, GraphQLField]:
    """Return the output fields for the given field descriptions, omitting forbidden ones.

    Each field gets its output-position type, the arguments from the description's metadata,
    its description text and a resolver validating the arguments it receives.
    """
    fields = {}
    for field_name, field_description in descriptions.items():
        if field_description.is_forbidden:
            logger.debug("Omitting forbidden field %s.", field_name)
            continue
        fields[field_name] = GraphQLField(
            translate_description(context, field_description, False),
            args=get_graphql_arguments(context, field_description),
            resolve=make_validated_resolver(field_description),
            description=field_description.description or "",
        )
    return fields
