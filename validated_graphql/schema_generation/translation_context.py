# Copyright 2019-present Kensho Technologies, LLC.
import logging
from typing import Any, Dict, Optional
import warnings

from graphql.type import GraphQLNamedType

from ..exceptions import TypeNameCollisionWarning


logger = logging.getLogger(__name__)

# Whatever determines the contents of a named type: the children of an object description, or
# the candidate descriptions of a composite type. Compared for equality only.
TypeSource = Any

ANONYMOUS_TYPE_NAME_PREFIX = "Anon"


class TranslationContext(object):
    """The named GraphQL types and anonymous type counter of a single schema build.

    Every type built under a given name is remembered, so later requests for the same name get
    the very same GraphQL type object. A context must not be shared between schema builds.
    """

    def __init__(self) -> None:
        """Create an empty context."""
        self._named_types: Dict[str, GraphQLNamedType] = {}
        self._type_sources: Dict[str, TypeSource] = {}
        self._anonymous_type_count = 0

    @property
    def named_types(self) -> Dict[str, GraphQLNamedType]:
        """Return a copy of the type name -> GraphQL type mapping built so far."""
        return dict(self._named_types)

    def get_anonymous_type_name(self) -> str:
        """Return a new type name, never before returned by this context."""
        self._anonymous_type_count += 1
        return "{}{}".format(ANONYMOUS_TYPE_NAME_PREFIX, self._anonymous_type_count)

    def get_cached_type(
        self, type_name: str, source: TypeSource
    ) -> Optional[GraphQLNamedType]:
        """Return the type previously registered under the name, or None if there is none.

        If the type was built from a different source than the given one, the two
        sources collide on the type name. The previously-built type is still returned,
        and a TypeNameCollisionWarning is emitted.
        """
        cached_type = self._named_types.get(type_name)
        if cached_type is None:
            return None

        if self._type_sources[type_name] != source:
            warnings.warn(
                'Type name "{}" is produced by more than one distinct description. Reusing the '
                "type built from the first one; the others are not represented in the "
                "schema.".format(type_name),
                TypeNameCollisionWarning,
            )
        logger.debug("Reusing cached GraphQL type %s.", type_name)
        return cached_type

    def register_type(
        self, type_name: str, graphql_type: GraphQLNamedType, source: TypeSource
    ) -> GraphQLNamedType:
        """Remember the type built from the given source under the given name, and return it.

        If a type was registered under the same name while the given one was being built, e.g.
        by a nested description using the same name, the earlier type is kept and returned.
        """
        existing_type = self.get_cached_type(type_name, source)
        if existing_type is not None:
            return existing_type
        logger.debug("Registering GraphQL type %s.", type_name)
        self._named_types[type_name] = graphql_type
        self._type_sources[type_name] = source
        return graphql_type
