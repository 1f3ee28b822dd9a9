from graphql import graphql_sync, print_schema

from validated_graphql import Alternatives, Array, Number, Object, String, get_graphql_schema


USERS = {1: {"id": 1, "name": "Ann"}, 2: {"id": 2, "name": "Bob"}}
GROUPS = [{"title": "Admins", "members": [USERS[1]]}]

user = Object({"id": Number().integer().required(), "name": String()}).meta(name="User")
group = Object({"title": String(), "members": Array(user)}).meta(name="Group")

query = {
    "user": user.meta(
        args={"id": Number().integer().min(1).required()},
        resolve=lambda source, info, id: USERS.get(id),
    ),
    "everything": Array(user, group).meta(
        resolve=lambda source, info: list(USERS.values()) + GROUPS
    ),
}
mutation = {
    "rename": user.meta(
        args={"id": Number().integer().required(), "name": String().min(1).required()},
        resolve=lambda source, info, id, name: dict(USERS[id], name=name),
    ),
    "lookup": Alternatives(user, group).meta(
        args={"filter": Alternatives(user, group).required()},
        resolve=lambda source, info, filter: filter,
    ),
}

schema = get_graphql_schema(query=query, mutation=mutation)
print(print_schema(schema))

# Write GraphQL query.
graphql_query = """
{
    user(id: 2) { name }
    everything {
        __typename
        ... on User { name }
        ... on Group { title }
    }
}
"""

# Execute query.
result = graphql_sync(schema, graphql_query)
print(result.data)

# Arguments failing validation are reported as field errors.
print(graphql_sync(schema, "{ user(id: 0) { name } }").errors)
