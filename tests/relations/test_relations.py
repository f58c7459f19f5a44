"""Tests for relation descriptors: has_one, has_many, belongs_to, belongs_to_many."""

import pytest

from recordmap.errors import ValidationError
from recordmap.relations import BelongsTo, BelongsToMany, HasMany, HasOne

from tests.helpers import Comment, Post, Profile, Role, User, make_user


class TestDefaults:
    """Key and pivot names derived from class names."""

    def test_descriptor_metadata(self):
        assert isinstance(User.posts, HasMany)
        assert User.posts.foreign_key == "user_id"
        assert User.posts.local_key == "id"
        assert isinstance(User.profile, HasOne)
        assert isinstance(Post.author, BelongsTo)
        assert Post.author.foreign_key == "user_id"
        assert Post.author.target is User

    def test_pivot_defaults(self):
        assert isinstance(User.roles, BelongsToMany)
        assert User.roles.pivot_table == "role_user"
        assert User.roles.foreign_pivot_key == "user_id"
        assert User.roles.related_pivot_key == "role_id"
        assert Role.users.pivot_table == "role_user"
        assert Role.users.foreign_pivot_key == "role_id"


class TestHasMany:
    """Owner -> many children through a foreign key on the child."""

    def test_create_and_resolve(self, schema):
        ann = make_user(schema, "Ann")
        bob = make_user(schema, "Bob")
        first = ann.posts.create(title="First")
        ann.posts.create(title="Second")
        bob.posts.create(title="Other")
        assert first.user_id == ann.id
        assert sorted(post.title for post in ann.posts()) == ["First", "Second"]
        assert ann.posts.query().where("title", "Second").count() == 1

    def test_soft_deleted_children_are_hidden(self, schema):
        ann = make_user(schema, "Ann")
        ann.posts.create(title="Kept")
        ann.posts.create(title="Gone").delete()
        assert [post.title for post in ann.posts()] == ["Kept"]

    def test_unsaved_owner(self, schema):
        ann = User.new(schema, name="Ann", email="ann@example.com")
        assert ann.posts() == []
        assert ann.profile() is None
        with pytest.raises(ValidationError):
            ann.posts.create(title="x")

    def test_save_links_existing_child(self, schema):
        ann = make_user(schema, "Ann")
        post = Post.create(schema, title="Orphan")
        ann.posts.save(post)
        assert Post.find(schema, post.id).user_id == ann.id

    def test_nested_relation(self, schema):
        ann = make_user(schema, "Ann")
        post = ann.posts.create(title="Hello")
        post.comments.create(body="Nice")
        assert [comment.body for comment in post.comments()] == ["Nice"]
        assert post.comments()[0].post().author() == ann


class TestHasOne:

    def test_resolve(self, schema):
        ann = make_user(schema, "Ann")
        assert ann.profile() is None
        profile = ann.profile.create(bio="Hi")
        assert ann.profile() == profile
        assert profile.user() == ann


class TestBelongsTo:
    """Child -> parent through its own foreign key."""

    def test_null_foreign_key_resolves_to_none(self, schema):
        post = Post.create(schema, title="Orphan")
        assert post.author() is None

    def test_associate_and_dissociate(self, schema):
        ann = make_user(schema, "Ann")
        post = Post.create(schema, title="Hello")
        post.author.associate(ann)
        assert post.user_id == ann.id
        assert post.is_dirty("user_id")
        post.save()
        assert Post.find(schema, post.id).author() == ann
        post.author.dissociate()
        post.save()
        assert Post.find(schema, post.id).user_id is None

    def test_missing_parent_resolves_to_none(self, schema):
        comment = Comment.create(schema, body="Dangling")
        assert comment.post() is None
        profile = Profile.new(schema, bio="x")
        assert profile.user() is None


class TestBelongsToMany:
    """Pivot table links, symmetric from both sides."""

    def test_attach_is_symmetric(self, schema):
        ann = make_user(schema, "Ann")
        bob = make_user(schema, "Bob")
        admin = Role.create(schema, name="admin")
        editor = Role.create(schema, name="editor")
        ann.roles.attach([admin, editor])
        bob.roles.attach(admin.id)
        assert sorted(role.name for role in ann.roles()) == ["admin", "editor"]
        assert sorted(user.name for user in admin.users()) == ["Ann", "Bob"]
        assert [user.name for user in editor.users()] == ["Ann"]

    def test_attach_is_idempotent(self, schema):
        ann = make_user(schema, "Ann")
        admin = Role.create(schema, name="admin")
        assert ann.roles.attach(admin) == [admin.id]
        assert ann.roles.attach(admin) == []
        assert len(ann.roles()) == 1

    def test_detach(self, schema):
        ann = make_user(schema, "Ann")
        roles = [Role.create(schema, name=name) for name in ("a", "b", "c")]
        ann.roles.attach(roles)
        assert ann.roles.detach(roles[0]) == 1
        assert sorted(role.name for role in ann.roles()) == ["b", "c"]
        assert ann.roles.detach() == 2
        assert ann.roles() == []

    def test_sync_and_toggle(self, schema):
        ann = make_user(schema, "Ann")
        a, b, c = (Role.create(schema, name=name) for name in ("a", "b", "c"))
        ann.roles.attach([a, b])
        assert ann.roles.sync([b, c]) == {"attached": [c.id], "detached": [a.id]}
        assert sorted(ann.roles.related_keys()) == [b.id, c.id]
        assert ann.roles.toggle([a, b]) == {"attached": [a.id], "detached": [b.id]}
        assert sorted(role.name for role in ann.roles()) == ["a", "c"]

    def test_no_pivot_rows(self, schema):
        ann = make_user(schema, "Ann")
        assert ann.roles() == []
        assert ann.roles.query().count() == 0
