# Copyright 2019-present Kensho Technologies, LLC.
from types import SimpleNamespace
import unittest

from graphql.type import (
    GraphQLBoolean,
    GraphQLFloat,
    GraphQLInputObjectType,
    GraphQLInt,
    GraphQLList,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLString,
    GraphQLUnionType,
)

from ...description import DescriptionNode, DescriptionType
from ...exceptions import (
    EmptyCompositeTypeError,
    InvalidUnionMemberError,
    TypeNameCollisionWarning,
    UnresolvedUnionMemberError,
    UnsupportedDescriptionTypeError,
)
from ...schema_generation.graphql_types import (
    get_composite_type_name,
    get_graphql_arguments,
    get_graphql_fields,
    translate_description,
)
from ...schema_generation.translation_context import TranslationContext
from ...schemas import Alternatives, Array, Boolean, Date, Number, Object, String


USER_SCHEMA = Object(
    {
        "id": Number().integer().required(),
        "name": String(),
        "password": String().forbidden(),
    }
).meta(name="User")

GROUP_SCHEMA = Object({"id": Number().integer(), "members": Array(USER_SCHEMA)}).meta(
    name="Group"
)


class TypeTranslationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.context = TranslationContext()

    def _translate(self, schema, is_input=False):
        return translate_description(self.context, schema.describe(), is_input)

    def test_scalar_types(self) -> None:
        for is_input in (True, False):
            self.assertIs(GraphQLBoolean, self._translate(Boolean(), is_input))
            self.assertIs(GraphQLString, self._translate(Date(), is_input))
            self.assertIs(GraphQLString, self._translate(String(), is_input))
            self.assertIs(GraphQLFloat, self._translate(Number(), is_input))
            self.assertIs(GraphQLInt, self._translate(Number().integer(), is_input))
            self.assertIs(GraphQLInt, self._translate(Number().min(0).integer(), is_input))

    def test_required_is_non_null_only_in_input_position(self) -> None:
        input_type = self._translate(String().required(), is_input=True)
        self.assertIsInstance(input_type, GraphQLNonNull)
        self.assertIs(GraphQLString, input_type.of_type)

        self.assertIs(GraphQLString, self._translate(String().required(), is_input=False))

        user_type = self._translate(USER_SCHEMA)
        self.assertIs(GraphQLInt, user_type.fields["id"].type)
        input_user_type = self._translate(USER_SCHEMA, is_input=True)
        self.assertIsInstance(input_user_type.fields["id"].type, GraphQLNonNull)

    def test_object_types(self) -> None:
        user_type = self._translate(USER_SCHEMA.description("Someone with an account."))
        self.assertIsInstance(user_type, GraphQLObjectType)
        self.assertEqual("User", user_type.name)
        self.assertEqual("Someone with an account.", user_type.description)
        self.assertEqual(["id", "name"], list(user_type.fields.keys()))

        input_user_type = self._translate(USER_SCHEMA, is_input=True)
        self.assertIsInstance(input_user_type, GraphQLInputObjectType)
        self.assertEqual("InputUser", input_user_type.name)
        self.assertEqual(["id", "name"], list(input_user_type.fields.keys()))

    def test_forbidden_boolean_child_is_omitted(self) -> None:
        schema = Object({"name": String(), "active": Boolean().forbidden(), "age": Number()})
        for is_input in (True, False):
            object_type = self._translate(schema, is_input)
            self.assertEqual(["name", "age"], list(object_type.fields.keys()))

    def test_named_object_types_are_cached(self) -> None:
        first_type = self._translate(USER_SCHEMA)
        second_type = self._translate(USER_SCHEMA)
        self.assertIs(first_type, second_type)

        # Nested references reuse the same type too.
        group_type = self._translate(GROUP_SCHEMA)
        self.assertIs(first_type, group_type.fields["members"].type.of_type)
        self.assertIs(first_type, self.context.named_types["User"])

    def test_anonymous_object_types_are_not_deduplicated(self) -> None:
        schema = Object({"name": String()})
        first_type = self._translate(schema)
        second_type = self._translate(schema)

        self.assertEqual("Anon1", first_type.name)
        self.assertEqual("Anon2", second_type.name)
        self.assertIsNot(first_type, second_type)
        self.assertEqual("InputAnon3", self._translate(schema, is_input=True).name)

    def test_type_name_collision_reuses_first_type(self) -> None:
        first_type = self._translate(USER_SCHEMA)
        other_user_schema = Object({"email": String()}).meta(name="User")

        with self.assertWarns(TypeNameCollisionWarning):
            second_type = self._translate(other_user_schema)
        self.assertIs(first_type, second_type)
        self.assertEqual(["id", "name"], list(second_type.fields.keys()))

    def test_array_with_single_item(self) -> None:
        list_type = self._translate(Array(String()))
        self.assertIsInstance(list_type, GraphQLList)
        self.assertIs(GraphQLString, list_type.of_type)

        list_type = self._translate(Array(USER_SCHEMA, Number().forbidden()))
        self.assertIsInstance(list_type, GraphQLList)
        self.assertIs(self.context.named_types["User"], list_type.of_type)

        input_list_type = self._translate(Array(String().required()), is_input=True)
        self.assertIsInstance(input_list_type.of_type, GraphQLNonNull)

    def test_array_with_multiple_items_is_union_list(self) -> None:
        list_type = self._translate(Array(USER_SCHEMA, GROUP_SCHEMA).description("Results."))
        self.assertIsInstance(list_type, GraphQLList)

        union_type = list_type.of_type
        self.assertIsInstance(union_type, GraphQLUnionType)
        self.assertEqual("UserOrGroup", union_type.name)
        self.assertEqual("Results.", union_type.description)
        self.assertEqual(
            [self.context.named_types["User"], self.context.named_types["Group"]],
            list(union_type.types),
        )
        self.assertIs(union_type, self.context.named_types["UserOrGroup"])

        # Translating the same candidates again reuses the cached union.
        self.assertIs(union_type, self._translate(Array(USER_SCHEMA, GROUP_SCHEMA)).of_type)

    def test_alternatives_are_not_list_wrapped(self) -> None:
        union_type = self._translate(Alternatives(USER_SCHEMA, GROUP_SCHEMA, String().forbidden()))
        self.assertIsInstance(union_type, GraphQLUnionType)
        self.assertEqual("UserOrGroup", union_type.name)

        # A single remaining branch is translated directly.
        self.assertIs(GraphQLString, self._translate(Alternatives(String(), Number().forbidden())))

    def test_composite_type_names(self) -> None:
        candidates = [
            USER_SCHEMA.describe(),
            Object({"a": String()}).describe(),
            Object({"b": String()}).meta(name="postalAddress").describe(),
        ]
        self.assertEqual("UserOrObjectOrPostaladdress", get_composite_type_name(candidates, False))
        self.assertEqual(
            "InputUserOrInputObjectOrInputPostaladdress",
            get_composite_type_name(candidates, True),
        )

    def test_input_composite_merges_fields(self) -> None:
        first_schema = Object({"id": Number().integer(), "name": String()}).meta(name="Person")
        second_schema = Object({"name": Number(), "hidden": Boolean().forbidden()}).meta(
            name="Robot"
        )
        input_type = self._translate(
            Alternatives(first_schema, second_schema).required(), is_input=True
        )

        self.assertIsInstance(input_type, GraphQLNonNull)
        merged_type = input_type.of_type
        self.assertIsInstance(merged_type, GraphQLInputObjectType)
        self.assertEqual("InputPersonOrInputRobot", merged_type.name)
        self.assertEqual(["id", "name"], list(merged_type.fields.keys()))
        # The later candidate's field replaces the earlier one.
        self.assertIs(GraphQLFloat, merged_type.fields["name"].type)

        input_list_type = self._translate(Array(first_schema, second_schema), is_input=True)
        self.assertIs(merged_type, input_list_type.of_type)

    def test_invalid_composites(self) -> None:
        with self.assertRaises(EmptyCompositeTypeError):
            self._translate(Array())
        with self.assertRaises(EmptyCompositeTypeError):
            self._translate(Alternatives(String().forbidden(), Number().forbidden()))
        with self.assertRaises(EmptyCompositeTypeError):
            self._translate(Alternatives(String(), Number()), is_input=True)
        with self.assertRaises(InvalidUnionMemberError):
            self._translate(Array(String(), Number()))

    def test_unsupported_description_type(self) -> None:
        with self.assertRaises(UnsupportedDescriptionTypeError):
            translate_description(self.context, DescriptionNode("binary"), False)

        # Nested inside otherwise-supported descriptions.
        description = DescriptionNode(
            DescriptionType.OBJECT, children={"payload": DescriptionNode("binary")}
        )
        with self.assertRaises(UnsupportedDescriptionTypeError):
            translate_description(self.context, description, False)


class UnionMemberResolutionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.context = TranslationContext()

    def _get_union_type(self, *candidates):
        return translate_description(
            self.context, Alternatives(*candidates).describe(), is_input=False
        )

    def test_resolution_by_keys(self) -> None:
        union_type = self._get_union_type(USER_SCHEMA, GROUP_SCHEMA)
        resolve_type = union_type.resolve_type

        user = {"id": 1, "name": "Ann", "password": None}
        self.assertEqual("User", resolve_type(user, None, union_type))
        self.assertEqual("Group", resolve_type({"id": 1, "members": []}, None, union_type))
        self.assertEqual("User", resolve_type(SimpleNamespace(**user), None, union_type))

        with self.assertRaises(UnresolvedUnionMemberError):
            resolve_type({"id": 1}, None, union_type)
        with self.assertRaises(UnresolvedUnionMemberError):
            resolve_type({"id": 1, "name": "Ann", "extra": True}, None, union_type)
        with self.assertRaises(UnresolvedUnionMemberError):
            resolve_type(5, None, union_type)

    def test_is_type_of_predicate_takes_precedence(self) -> None:
        admin_schema = Object(
            {"id": Number().integer(), "name": String(), "password": String().forbidden()}
        ).meta(name="Admin", is_type_of=lambda value: value["name"] == "root")
        union_type = self._get_union_type(admin_schema, USER_SCHEMA)
        resolve_type = union_type.resolve_type

        # Both candidates' keys match, but the predicate picks the admin type.
        root = {"id": 0, "name": "root", "password": "x"}
        self.assertEqual("Admin", resolve_type(root, None, union_type))
        self.assertEqual("User", resolve_type(dict(root, name="Ann"), None, union_type))

    def test_key_set_includes_forbidden_children(self) -> None:
        union_type = self._get_union_type(USER_SCHEMA, GROUP_SCHEMA)
        resolve_type = union_type.resolve_type

        # A stored row still carrying its hidden password resolves to the user type.
        stored_user = {"id": 1, "name": "Ann", "password": "x"}
        self.assertEqual("User", resolve_type(stored_user, None, union_type))
        self.assertNotIn("password", union_type.types[0].fields)

        with self.assertRaises(UnresolvedUnionMemberError):
            resolve_type({"id": 1, "name": "Ann"}, None, union_type)


class FieldTests(unittest.TestCase):
    def setUp(self) -> None:
        self.context = TranslationContext()

    def test_fields(self) -> None:
        descriptions = {
            "user": USER_SCHEMA.description("The current user.").describe(),
            "count": Number().integer().required().describe(),
            "secret": String().forbidden().describe(),
        }
        fields = get_graphql_fields(self.context, descriptions)

        self.assertEqual(["user", "count"], list(fields.keys()))
        self.assertEqual("The current user.", fields["user"].description)
        self.assertEqual("", fields["count"].description)
        self.assertIs(GraphQLInt, fields["count"].type)
        self.assertEqual({}, fields["count"].args)
        self.assertTrue(callable(fields["count"].resolve))

    def test_arguments(self) -> None:
        description = USER_SCHEMA.meta(
            args={
                "id": Number().integer().required().description("Identifier."),
                "filter": Object({"name": String()}).meta(name="UserFilter"),
                "internal": Boolean().forbidden(),
            }
        ).describe()
        arguments = get_graphql_arguments(self.context, description)

        self.assertEqual(["id", "filter"], list(arguments.keys()))
        self.assertIsInstance(arguments["id"].type, GraphQLNonNull)
        self.assertIs(GraphQLInt, arguments["id"].type.of_type)
        self.assertEqual("Identifier.", arguments["id"].description)
        self.assertEqual("InputUserFilter", arguments["filter"].type.name)

        self.assertIsNone(get_graphql_arguments(self.context, String().describe()))
