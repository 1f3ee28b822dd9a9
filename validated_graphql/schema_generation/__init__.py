# Copyright 2019-present Kensho Technologies, LLC.
from .graphql_schema import get_graphql_schema  # noqa
from .graphql_types import translate_description  # noqa
from .resolvers import make_validated_resolver, validate_arguments  # noqa
from .translation_context import TranslationContext  # noqa
