# Copyright 2019-present Kensho Technologies, LLC.
import logging
from typing import Any, Callable, Collection, Dict, Mapping, NamedTuple, Optional, Tuple

from graphql import GraphQLResolveInfo, default_field_resolver

from ..description import ArgumentsSchema, DescriptionNode, describe_schema
from ..exceptions import ArgumentValidationError


logger = logging.getLogger(__name__)


class ArgumentValidationResult(NamedTuple):
    """The outcome of validating field arguments. Exactly one of the two fields is not None."""

    value: Optional[Dict[str, Any]]  # argument name -> validated and coerced argument value
    error: Optional[ArgumentValidationError]


def get_required_argument_names(arguments_schema: ArgumentsSchema) -> Tuple[str, ...]:
    """Return the names of the arguments whose schemas require a value, in declaration order."""
    return tuple(
        argument_name
        for argument_name, argument_schema in arguments_schema.items()
        if describe_schema(argument_schema).is_required
    )


def validate_arguments(
    arguments_schema: ArgumentsSchema,
    arguments: Mapping[str, Any],
    field_name: str,
    required_argument_names: Optional[Collection[str]] = None,
) -> ArgumentValidationResult:
    """Validate the arguments supplied to a field against the field's arguments schema.

    Args:
        arguments_schema: dict, argument name -> validation schema for that argument
        arguments: dict, argument name -> value, the arguments supplied to the field
        field_name: str, name of the field the arguments were supplied to
        required_argument_names: optional collection of str, the names of the required arguments.
                                 Computed from the arguments schema if not given

    Returns:
        ArgumentValidationResult whose value holds only the supplied arguments, validated and
        coerced, if all of them are valid. Otherwise, its error describes every argument that
        is unknown, missing despite being required, or invalid.
    """
    errors: Dict[str, str] = {}
    validated_arguments: Dict[str, Any] = {}

    for argument_name, argument_value in arguments.items():
        argument_schema = arguments_schema.get(argument_name)
        if argument_schema is None:
            errors[argument_name] = "Unexpected argument."
            continue
        try:
            validated_arguments[argument_name] = argument_schema.validate(argument_value)
        except ValueError as e:
            errors[argument_name] = str(e)

    if required_argument_names is None:
        required_argument_names = get_required_argument_names(arguments_schema)
    for argument_name in required_argument_names:
        if argument_name not in arguments:
            errors[argument_name] = "Required argument is missing."

    if errors:
        return ArgumentValidationResult(None, ArgumentValidationError(field_name, errors))
    return ArgumentValidationResult(validated_arguments, None)


def make_validated_resolver(description: DescriptionNode) -> Callable[..., Any]:
    """Return a graphql-core resolver for the field described by the given description.

    When the field has an arguments schema and arguments were supplied, they are validated first,
    and the resolver raises ArgumentValidationError without resolving the field if any of them
    is invalid. Otherwise the field is resolved with the validated arguments.

    The field is resolved by the "resolve" function from the description's metadata, called as
    resolve(source, info, **arguments). If there is none, the value is read from the source
    object's key or attribute named after the field, as graphql-core does by default.
    """
    arguments_schema = description.arguments_schema
    resolve = description.resolve
    required_argument_names = (
        get_required_argument_names(arguments_schema) if arguments_schema is not None else None
    )

    def validated_resolve(source: Any, info: GraphQLResolveInfo, **arguments: Any) -> Any:
        """Resolve the field, validating its arguments first."""
        if arguments_schema is not None and arguments:
            validation_result = validate_arguments(
                arguments_schema, arguments, info.field_name, required_argument_names
            )
            if validation_result.error is not None:
                logger.debug("Rejected arguments: %s", validation_result.error)
                raise validation_result.error
            arguments = validation_result.value

        if resolve is not None:
            return resolve(source, info, **arguments)
        return default_field_resolver(source, info, **arguments)

    return validated_resolve
