"""Test declarative optional-filter construction."""
from sqlalchemy import select

from patterns.repository import FilterRule, apply_filters, set_fields
from verticals.library.models.db_models import Author, Book
from verticals.library.models.schemas import AuthorQuery, BookQuery, BookStatus, MemberQuery
from verticals.library.repository import AuthorRepository, BookRepository, MemberRepository


def _sql(stmt) -> str:
    return str(stmt.compile(compile_kwargs={"literal_binds": True}))


def test_no_fields_set_means_no_where_clause():
    stmt = apply_filters(select(Book), BookRepository.filter_rules, BookQuery())
    assert "WHERE" not in _sql(stmt)


def test_single_field_becomes_equality():
    stmt = apply_filters(select(Book), BookRepository.filter_rules, BookQuery(name="Dune"))
    sql = _sql(stmt)
    assert "book.name = 'Dune'" in sql
    assert "book.year" not in sql.split("WHERE")[1]


def test_set_fields_are_anded():
    criteria = BookQuery(year=1965, category="SciFi", author="Jane Doe")
    sql = _sql(apply_filters(select(Book), BookRepository.filter_rules, criteria))
    where = sql.split("WHERE")[1]
    assert "book.year = 1965" in where
    assert "book.category = 'SciFi'" in where
    assert "book.author = 'Jane Doe'" in where
    assert where.count(" AND ") == 2
    assert " OR " not in where


def test_status_filter_uses_stored_value():
    criteria = BookQuery(status=BookStatus.RENTED)
    sql = _sql(apply_filters(select(Book), BookRepository.filter_rules, criteria))
    assert "book.status = 'Rented'" in sql


def test_author_rules_cover_all_fields():
    fields = [rule.field for rule in AuthorRepository.filter_rules]
    assert fields == ["name", "country", "birth_date"]
    assert set(fields) == set(AuthorQuery.model_fields)


def test_book_rules_cover_all_fields():
    assert {r.field for r in BookRepository.filter_rules} == set(BookQuery.model_fields)


def test_member_rules_cover_all_fields():
    assert {r.field for r in MemberRepository.filter_rules} == set(MemberQuery.model_fields)


def test_member_query_filters_on_join():
    repo = MemberRepository(session=None)
    stmt = apply_filters(repo.base_select(), repo.filter_rules, MemberQuery(user_name="Alice"))
    sql = _sql(stmt)
    assert "JOIN users_history ON users_history.nation_id = users.nation_id" in sql
    assert "users.name = 'Alice'" in sql


def test_set_fields_ignores_none():
    criteria = AuthorQuery(country="USA")
    assert set_fields(AuthorRepository.filter_rules, criteria) == {"country": "USA"}


def test_falsy_but_set_value_still_filters():
    rules = (FilterRule("year", Book.year),)
    criteria = BookQuery(year=0)
    assert "book.year = 0" in _sql(apply_filters(select(Book), rules, criteria))


def test_missing_attribute_is_treated_as_unset():
    rules = (FilterRule("nickname", Author.name),)
    stmt = apply_filters(select(Author), rules, AuthorQuery(name="x"))
    assert "WHERE" not in _sql(stmt)
