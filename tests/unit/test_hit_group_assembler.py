"""HitGroupAssembler unit tests: presence, order, labels and links of hit groups."""

from storefront_search.schemas.search import Query, SearchHit, SearchOutcome, SearchResult


def make_outcome(result: SearchResult, term: str = "shoes", language_code: str | None = None) -> SearchOutcome:
    query = Query(term=term, fields=("name",), limit=10, language_code=language_code)
    return SearchOutcome(query=query, term=term, total_count=result.total_count, result=result)


def test_no_groups_for_empty_sources(assembler) -> None:
    assert assembler.assemble_groups(make_outcome(SearchResult())) == []


def test_groups_in_assembly_order(assembler) -> None:
    result = SearchResult(
        spell_checker_suggestions=["shoe"],
        top_categories=[SearchHit(entity_id=10, fields={"name": "Sport Shoes"})],
        top_manufacturers=[SearchHit(entity_id=20, fields={"name": "Acme"})],
    )

    groups = assembler.assemble_groups(make_outcome(result))

    assert [group.name for group in groups] == ["SpellChecker", "TopCategories", "TopManufacturers"]
    assert [group.display_name for group in groups] == ["Did you mean?", "Top categories", "Top brands"]
    assert all(group.ordinal == -100 for group in groups)


def test_group_present_only_when_source_non_empty(assembler) -> None:
    result = SearchResult(top_manufacturers=[SearchHit(entity_id=20, fields={"name": "Acme"})])

    groups = assembler.assemble_groups(make_outcome(result))

    assert [group.name for group in groups] == ["TopManufacturers"]
    assert len(groups[0].hits) == 1


def test_spell_checker_items(assembler) -> None:
    result = SearchResult(spell_checker_suggestions=["shoe", "red shoes"])

    (group,) = assembler.assemble_groups(make_outcome(result, term="shoez"))

    assert [(item.label, item.url) for item in group.hits] == [
        ("shoe", "/api/v1/search?q=shoe"),
        ("red shoes", "/api/v1/search?q=red+shoes"),
    ]


def test_top_hit_items_use_term_and_entity_id(assembler) -> None:
    result = SearchResult(
        top_categories=[SearchHit(entity_id=10, fields={"name": "Sport Shoes"})],
        top_manufacturers=[SearchHit(entity_id=20, fields={"name": "Acme"})],
    )

    categories, manufacturers = assembler.assemble_groups(make_outcome(result))

    assert categories.hits[0].url == "/api/v1/search?q=shoes&c=10"
    assert manufacturers.hits[0].url == "/api/v1/search?q=shoes&m=20"


def test_top_hit_labels_are_localized_with_fallback(assembler) -> None:
    result = SearchResult(
        top_categories=[
            SearchHit(entity_id=10, fields={"name": "Sport Shoes"}, localized={"de": {"name": "Sportschuhe"}}),
            SearchHit(entity_id=11, fields={"name": "Formal"}),
            SearchHit(entity_id=12, fields={}),
        ],
    )

    (group,) = assembler.assemble_groups(make_outcome(result, language_code="de"))

    assert group.display_name == "Top-Kategorien"
    assert [item.label for item in group.hits] == ["Sportschuhe", "Formal", ""]
