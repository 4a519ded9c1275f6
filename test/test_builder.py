import threading

import pytest
from sqlalchemy import select

from quarry import BuilderOptions, QueryBuilder, UnknownFieldError, build
from quarry.core.query.builder import to_pairs

from conftest import Post, tags


def compile_query(query):
    compiled = query.compile()
    return str(compiled), compiled.params


def where_sql(query) -> str:
    sql, _ = compile_query(query)
    return sql.split("WHERE", 1)[1].strip() if "WHERE" in sql else ""


@pytest.fixture
def posts():
    return QueryBuilder(Post)


class TestApply:
    def test_empty_list_returns_query_unchanged(self, posts):
        query = select(Post)
        assert posts.apply(query, []) is query

    def test_default_predicates_are_anded_in_order(self, posts):
        query = posts.build([("title", "x"), ("published", "true")])
        assert where_sql(query) == "posts.title = :title_1 AND posts.published = :published_1"
        assert compile_query(query)[1] == {"title_1": "x", "published_1": True}

    def test_duplicate_fields_add_duplicate_predicates(self, posts):
        query = posts.build([("title", "a"), ("title", "b")])
        assert where_sql(query) == "posts.title = :title_1 AND posts.title = :title_2"
        assert compile_query(query)[1] == {"title_1": "a", "title_2": "b"}

    def test_attribute_name_differs_from_column_name(self, posts):
        query = posts.build({"author": "ada"})
        assert where_sql(query) == "posts.author_name = :author_name_1"

    def test_builds_on_given_query(self, posts):
        base = select(Post).where(Post.id > 1)
        query = posts.build({"title": "x"}, base)
        assert where_sql(query) == "posts.id > :id_1 AND posts.title = :title_1"

    def test_core_table(self):
        query = QueryBuilder(tags).build({"label": "python"})
        assert where_sql(query) == "tags.label = :label_1"


class TestUnknownField:
    def test_raises_unknown_field_error(self, posts):
        with pytest.raises(UnknownFieldError) as excinfo:
            posts.build({"not_a_real_field": "x"})

        assert excinfo.value.field == "not_a_real_field"
        assert excinfo.value.entity == "Post"
        assert excinfo.value.valid_fields == ["author", "id", "published", "title"]

    def test_is_a_key_error(self, posts):
        with pytest.raises(KeyError):
            posts.build({"title": "x", "nope": "y"})

    def test_whitelist_protects(self):
        posts = QueryBuilder(Post, whitelist=["title"])
        query = posts.build({"not_a_real_field": "x", "title": "t"})
        assert where_sql(query) == "posts.title = :title_1"


class TestOverrides:
    def test_override_replaces_default_and_continues(self, posts):
        @posts.override("title")
        def title(query, value, tail):
            return posts.apply(query.where(Post.title.like(f"%{value}%")), tail)

        query = posts.build([("title", "hel"), ("published", "true")])
        assert where_sql(query) == "posts.title LIKE :title_1 AND posts.published = :published_1"
        assert compile_query(query)[1] == {"title_1": "%hel%", "published_1": True}

    def test_override_can_short_circuit(self, posts):
        @posts.override("title")
        def title(query, value, tail):
            return query.where(Post.title == value)

        query = posts.build([("title", "x"), ("published", "true"), ("bogus", "1")])
        assert where_sql(query) == "posts.title = :title_1"

    def test_override_receives_coerced_value_and_tail(self, posts):
        seen = []

        def published(query, value, tail):
            seen.append((value, tail))
            return query

        posts.overrides["published"] = published
        posts.build([("title", "x"), ("published", "false"), ("author", "ada")])
        assert seen == [(False, [("author", "ada")])]

    def test_override_for_a_field_that_is_not_a_column(self):
        def search(query, value, tail):
            return posts.apply(query.where(Post.title.contains(value)), tail)

        posts = QueryBuilder(Post, overrides={"q": search})
        query = posts.build({"q": "hi", "id": "1"})
        sql = where_sql(query)
        assert sql.startswith("posts.title LIKE")
        assert sql.endswith("AND posts.id = :id_1")
        assert compile_query(query)[1] == {"title_1": "hi", "id_1": "1"}

    def test_override_errors_propagate(self, posts):
        class Boom(Exception):
            pass

        @posts.override("title")
        def title(query, value, tail):
            raise Boom()

        with pytest.raises(Boom):
            posts.build({"title": "x"})

    def test_whitelist_applies_to_override_fields(self):
        calls = []
        posts = QueryBuilder(Post, whitelist=["title"], overrides={"q": lambda q, v, t: calls.append(v) or q})
        posts.build({"q": "x"})
        assert calls == []


class TestScenario:
    def test_post_scenario(self, session):
        query = build(
            Post,
            ["title", "published"],
            {"title": "hello", "published": "true", "bogus": "1"},
        )
        assert where_sql(query) == "posts.title = :title_1 AND posts.published = :published_1"
        assert compile_query(query)[1] == {"title_1": "hello", "published_1": True}
        assert [post.id for post in session.scalars(query)] == [1]

    def test_no_params_selects_everything(self, session):
        query = QueryBuilder(Post).build({})
        assert [post.id for post in session.scalars(query.order_by(Post.id))] == [1, 2, 3]

    def test_false_matches_unpublished(self, session):
        query = QueryBuilder(Post).build({"published": "false", "author": "ada"})
        assert [post.id for post in session.scalars(query)] == [2]


class TestConstruction:
    def test_from_options_with_alias(self):
        posts = QueryBuilder.from_options({"with": Post, "whitelist": ["title"]})
        assert posts.model is Post
        assert posts.whitelist == ["title"]
        assert posts.name == "build_post_query"

    def test_from_options_model(self):
        posts = QueryBuilder.from_options(BuilderOptions(model=Post))
        assert posts.whitelist is None

    def test_from_options_requires_model(self):
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            QueryBuilder.from_options({"whitelist": ["title"]})

    def test_rejects_unmapped_entities(self):
        with pytest.raises(TypeError):
            QueryBuilder(object)

    def test_callable(self, posts):
        assert where_sql(posts({"id": "1"})) == "posts.id = :id_1"

    def test_to_pairs(self):
        assert to_pairs({"a": "1", "b": "2"}) == [("a", "1"), ("b", "2")]
        assert to_pairs([("a", "1"), ("a", "2")]) == [("a", "1"), ("a", "2")]

    def test_concurrent_builds_do_not_interfere(self, posts):
        results = {}

        def run(i):
            results[i] = compile_query(posts.build({"title": str(i)}))[1]

        threads = [threading.Thread(target=run, args=(i,)) for i in range(20)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results == {i: {"title_1": str(i)} for i in range(20)}


class TestLongInputs:
    def test_many_default_pairs(self, posts):
        pairs = [("id", str(i)) for i in range(3000)]
        query = posts.apply(select(Post), pairs)
        assert len(query.whereclause.clauses) == 3000

    def test_override_gets_tail_after_its_position(self, posts):
        seen = []

        @posts.override("author")
        def author(query, value, tail):
            seen.append(tail)
            return posts.apply(query, tail)

        query = posts.apply(select(Post), (("id", 1), ("title", "t"), ("author", "a"), ("id", 2)))
        assert seen == [(("id", 2),)]
        assert where_sql(query) == "posts.id = :id_1 AND posts.title = :title_1 AND posts.id = :id_2"

    def test_continuing_overrides_are_bounded_by_the_recursion_limit(self, posts):
        @posts.override("title")
        def title(query, value, tail):
            return posts.apply(query, tail)

        with pytest.raises(RecursionError):
            posts.build([("title", "a")] * 1500)


def test_whitelist_must_not_be_a_string():
    with pytest.raises(TypeError):
        QueryBuilder(Post, whitelist="title")
