from storefront_search.schemas.search import SearchHit


def resolve_label(hit: SearchHit, language_code: str | None = None, field: str = "name") -> str:
    """
    Pick the display label of a hit.

    Candidates in order: the localized value (only when a language code is
    given), then the unlocalized value. The first non-empty one wins. When
    both are missing the label is an empty string, which is a valid result.
    """
    candidates = []
    if language_code:
        candidates.append(lambda: hit.get_field(field, language_code))
    candidates.append(lambda: hit.get_field(field))

    for candidate in candidates:
        if label := candidate():
            return label

    return ""
