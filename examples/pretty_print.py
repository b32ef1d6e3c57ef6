from docquery import Ref, Time, render
from docquery.expr import query as q

# Task: Show a paginated "active users created after a date" query the way it
# would appear in a debug log, then again with passwords redacted.

users = Ref("users", Ref("collections"))

expr = q.let(
    {
        "since": Time("2024-01-01T00:00:00Z"),
        "page": q.paginate(q.match(q.index("users_by_status"), "active"), size=50),
    },
    q.map_(
        q.filter_(
            q.select("data", q.var("page")),
            lambda ref: q.gt(q.select(["ts"], q.get(ref)), q.var("since")),
        ),
        lambda ref: q.get(ref),
    ),
)

print(render(expr))
print()
print(repr(expr))
print()

signup = q.create(users, {"data": {"email": "ada@example.com", "password": "hunter2"}})


def redact(text, path):
    if path and path[-1] == "password":
        return '"***"'
    return text


print(render(signup, map=redact))
