"""SearchOrchestrator unit tests: single call, spell correction retry, revert, assembly."""

import pytest

from storefront_search.core.config import SearchConfig
from storefront_search.schemas.search import (
    CatalogSearchQuery,
    Query,
    SearchHit,
    SearchMode,
    SearchResult,
    ValidationFailure,
)
from storefront_search.services.search_orchestrator import SearchOrchestrator


class FakeBackend:
    """Returns canned results per term and records every call."""

    def __init__(self, results: dict[str, SearchResult]):
        self.results = results
        self.calls: list[Query] = []

    def __call__(self, query: Query) -> SearchResult:
        self.calls.append(query)
        return self.results.get(query.term, SearchResult())


def products(count: int) -> SearchResult:
    return SearchResult(
        hits=[SearchHit(entity_id=i, fields={"name": f"Product {i}"}) for i in range(count)],
        total_count=count,
    )


def make_query(term: str) -> Query:
    return Query(term=term, fields=("name",), limit=24)


@pytest.fixture
def make_orchestrator(assembler):
    def factory(results: dict[str, SearchResult], config: SearchConfig | None = None):
        backend = FakeBackend(results)
        return SearchOrchestrator(search=backend, assembler=assembler, config=config or SearchConfig(search_term_min_length=3)), backend

    return factory


def test_hits_on_first_search_make_one_call(make_orchestrator) -> None:
    """Suggestions are ignored when the first search already found something."""
    first = products(3).model_copy(update={"spell_checker_suggestions": ["shoe"]})
    orchestrator, backend = make_orchestrator({"shoes": first})

    outcome = orchestrator.execute(make_query("shoes"), SearchMode.FULL)

    assert len(backend.calls) == 1
    assert outcome.term == "shoes"
    assert outcome.attempted_term is None
    assert outcome.total_count == 3
    assert outcome.result.spell_checker_suggestions == ["shoe"]
    assert outcome.retried is False


def test_no_hits_and_no_suggestions_make_one_call(make_orchestrator) -> None:
    orchestrator, backend = make_orchestrator({})

    outcome = orchestrator.execute(make_query("xk7qz"), SearchMode.FULL)

    assert len(backend.calls) == 1
    assert outcome.term == "xk7qz"
    assert outcome.total_count == 0
    assert outcome.result.spell_checker_suggestions == []


def test_retry_with_first_suggestion_replaces_term(make_orchestrator) -> None:
    orchestrator, backend = make_orchestrator(
        {
            "shoez": SearchResult(spell_checker_suggestions=["shoes", "shoe"]),
            "shoes": products(5).model_copy(update={"spell_checker_suggestions": ["shoe"]}),
        }
    )

    outcome = orchestrator.execute(make_query("shoez"), SearchMode.FULL)

    assert [call.term for call in backend.calls] == ["shoez", "shoes"]
    assert outcome.term == "shoes"
    assert outcome.query.term == "shoes"
    assert outcome.attempted_term == "shoez"
    assert outcome.total_count == 5
    assert len(outcome.hits) == 5
    # Original suggestions minus the applied one, not the retry's own suggestions
    assert outcome.result.spell_checker_suggestions == ["shoe"]
    assert outcome.retried is True


def test_retry_keeps_everything_but_the_term(make_orchestrator) -> None:
    orchestrator, backend = make_orchestrator(
        {
            "shoez": SearchResult(spell_checker_suggestions=["shoes"]),
            "shoes": products(1),
        }
    )
    query = Query(term="shoez", fields=("name", "sku"), offset=0, limit=12, language_code="de", category_id=11)

    orchestrator.execute(query, SearchMode.FULL)

    retry = backend.calls[1]
    assert retry.fields == ("name", "sku")
    assert retry.limit == 12
    assert retry.language_code == "de"
    assert retry.category_id == 11
    # The caller's query is untouched
    assert query.term == "shoez"


def test_failed_retry_reverts_to_original(make_orchestrator) -> None:
    first = SearchResult(spell_checker_suggestions=["shoes", "shoe"])
    orchestrator, backend = make_orchestrator(
        {
            "shoez": first,
            "shoes": SearchResult(spell_checker_suggestions=["hose"]),
        }
    )

    outcome = orchestrator.execute(make_query("shoez"), SearchMode.FULL)

    assert len(backend.calls) == 2
    assert outcome.term == "shoez"
    assert outcome.attempted_term is None
    assert outcome.total_count == 0
    assert outcome.result == first


def test_at_most_one_retry(make_orchestrator) -> None:
    """Even when every suggestion leads to more suggestions, only one retry happens."""
    orchestrator, backend = make_orchestrator(
        {
            "aaa": SearchResult(spell_checker_suggestions=["bbb", "ccc"]),
            "bbb": SearchResult(spell_checker_suggestions=["ccc"]),
            "ccc": products(2),
        }
    )

    outcome = orchestrator.execute(make_query("aaa"), SearchMode.FULL)

    assert [call.term for call in backend.calls] == ["aaa", "bbb"]
    assert outcome.term == "aaa"


def test_instant_mode_never_retries(make_orchestrator) -> None:
    orchestrator, backend = make_orchestrator(
        {
            "shoez": SearchResult(spell_checker_suggestions=["shoes"]),
            "shoes": products(5),
        }
    )

    outcome = orchestrator.execute(make_query("shoez"), SearchMode.INSTANT)

    assert len(backend.calls) == 1
    assert outcome.term == "shoez"
    assert outcome.result.spell_checker_suggestions == ["shoes"]


def test_retry_can_be_disabled(make_orchestrator) -> None:
    orchestrator, backend = make_orchestrator(
        {"shoez": SearchResult(spell_checker_suggestions=["shoes"]), "shoes": products(5)},
        config=SearchConfig(spell_check_retry_enabled=False),
    )

    orchestrator.execute(make_query("shoez"), SearchMode.FULL)

    assert len(backend.calls) == 1


def test_backend_errors_propagate(assembler) -> None:
    def failing(query: Query) -> SearchResult:
        raise ConnectionError("index unavailable")

    orchestrator = SearchOrchestrator(search=failing, assembler=assembler, config=SearchConfig())

    with pytest.raises(ConnectionError):
        orchestrator.execute(make_query("shoes"), SearchMode.FULL)


def test_run_short_term_makes_no_backend_call(make_orchestrator) -> None:
    orchestrator, backend = make_orchestrator({})

    for mode in (SearchMode.INSTANT, SearchMode.FULL):
        result = orchestrator.run(CatalogSearchQuery(term="ab"), mode)
        assert isinstance(result, ValidationFailure)

    assert backend.calls == []


def test_run_assembles_spell_checker_group_after_retry(make_orchestrator) -> None:
    orchestrator, _backend = make_orchestrator(
        {
            "shoez": SearchResult(spell_checker_suggestions=["shoes", "shoe"]),
            "shoes": products(5),
        }
    )

    outcome = orchestrator.run(CatalogSearchQuery(term="shoez"), SearchMode.FULL)

    assert outcome.term == "shoes"
    assert [group.name for group in outcome.hit_groups] == ["SpellChecker"]
    assert [item.label for item in outcome.hit_groups[0].hits] == ["shoe"]


def test_run_without_suggestions_emits_no_spell_checker_group(make_orchestrator) -> None:
    orchestrator, _backend = make_orchestrator({})

    outcome = orchestrator.run(CatalogSearchQuery(term="xk7qz"), SearchMode.FULL)

    assert outcome.term == "xk7qz"
    assert outcome.total_count == 0
    assert outcome.hit_groups == []
