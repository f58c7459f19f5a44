"""Shared test entities, matching the tables created by the ``schema`` fixture."""

from typing import Optional

from recordmap import Record, belongs_to, belongs_to_many, has_many, has_one, scope


class User(Record, with_timestamps=True):
    FILLABLE = ("name", "email", "age", "is_active")

    name: str
    email: str
    age: int = 0
    is_active: bool = True

    posts = has_many("Post")
    profile = has_one("Profile")
    roles = belongs_to_many("Role")

    @scope
    def active(query):
        return query.where("is_active", True)

    @scope
    def adults(query, minimum=18):
        return query.where("age", ">=", minimum)


class Post(Record, soft_delete=True, with_timestamps=True):
    title: str
    body: str = ""
    user_id: Optional[int] = None
    is_published: bool = False

    author = belongs_to("User")
    comments = has_many("Comment")

    @scope
    def published(query):
        return query.where("is_published", True)

    @scope
    def recent(query):
        return query.latest()


class Role(Record):
    name: str

    users = belongs_to_many("User")


class Profile(Record):
    user_id: Optional[int] = None
    bio: str = ""

    user = belongs_to("User")


class Comment(Record):
    body: str
    post_id: Optional[int] = None

    post = belongs_to("Post")


def make_user(connection, name: str, age: int = 30, is_active: bool = True) -> User:
    return User.create(
        connection, name=name, email=f"{name.lower()}@example.com", age=age, is_active=is_active
    )
