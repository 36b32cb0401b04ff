"""
Catalog search backend: keyword search over product fields using rank-bm25,
spell checker suggestions using rapidfuzz.
"""

import logging
import re
from collections import Counter
from functools import lru_cache
from typing import Any

from rank_bm25 import BM25Okapi
from rapidfuzz import fuzz, process

from storefront_search.core.config import settings
from storefront_search.core.exceptions import SearchBackendError
from storefront_search.schemas.search import ProductSorting, Query, SearchHit, SearchResult

logger = logging.getLogger(__name__)


class CatalogSearchService:
    """
    In-memory full-text index over the product catalog.

    Every searchable field gets its own BM25 index so a query can be
    restricted to any subset of fields. A product matches when each query
    token occurs in at least one of the requested fields; matches are ranked
    by the sum of their per-field BM25 scores.

    Besides the product hits a search returns:
    - spell checker suggestions for query tokens missing from the index
    - the top categories and top manufacturers among all matching products

    Example:
        Query: "runing shoes" (fields: name, tagname)
        - "runing" is not indexed, so no product matches
        - suggestions: ["running shoes"]
    """

    def __init__(
        self,
        max_suggestions: int = 4,
        min_similarity: float = 75.0,
        top_hits_limit: int = 5,
    ):
        self.max_suggestions = max_suggestions
        self.min_similarity = min_similarity
        self.top_hits_limit = top_hits_limit

        self.products: list[dict[str, Any]] = []
        self.categories: dict[int, dict[str, Any]] = {}
        self.manufacturers: dict[int, dict[str, Any]] = {}
        self.field_indexes: dict[str, BM25Okapi] = {}
        self.field_tokens: dict[str, list[set[str]]] = {}
        self.field_vocabulary: dict[str, set[str]] = {}
        self.is_initialized = False

    def tokenize(self, text: str) -> list[str]:
        """
        Lowercase, replace punctuation with spaces, split on whitespace.

        Args:
            text: Input text

        Returns:
            List of tokens
        """
        text = re.sub(r"[^\w\s]", " ", text.lower())
        return [token for token in text.split() if token]

    def field_text(self, product: dict[str, Any], field: str) -> str:
        """Searchable text of one product field, including all localized values"""
        if field == "tagname":
            return " ".join(str(tag) for tag in product.get("tags") or [])

        parts = []
        if value := product.get(field):
            parts.append(str(value))
        for values in (product.get("localized") or {}).values():
            if localized_value := values.get(field):
                parts.append(str(localized_value))
        return " ".join(parts)

    def build_index(
        self,
        products: list[dict[str, Any]],
        categories: list[dict[str, Any]] | None = None,
        manufacturers: list[dict[str, Any]] | None = None,
        fields: tuple[str, ...] = ("name", "shortdescription", "fulldescription", "tagname", "sku"),
    ) -> None:
        """
        Build the per-field indexes from catalog documents.

        Args:
            products: Dicts with 'id' plus the searchable fields, 'tags',
                'category_ids', 'manufacturer_ids', 'price', 'created_on'
                and an optional 'localized' {language: {field: value}} table
            categories: Dicts with 'id', 'name' and optional 'localized'
            manufacturers: Same shape as categories
            fields: Product fields to index
        """
        field_indexes = {}
        field_tokens = {}
        field_vocabulary = {}

        for field in fields:
            corpus = [self.tokenize(self.field_text(product, field)) for product in products]
            vocabulary = {token for doc in corpus for token in doc}
            field_tokens[field] = [set(doc) for doc in corpus]
            field_vocabulary[field] = vocabulary
            # BM25Okapi divides by the average document length
            if vocabulary:
                field_indexes[field] = BM25Okapi(corpus)

        self.products = list(products)
        self.categories = {c["id"]: c for c in categories or []}
        self.manufacturers = {m["id"]: m for m in manufacturers or []}
        self.field_indexes = field_indexes
        self.field_tokens = field_tokens
        self.field_vocabulary = field_vocabulary
        self.is_initialized = True

        if not products:
            logger.warning("⚠️ Catalog index built without products")
        logger.info(
            f"✅ Catalog index built with {len(self.products)} products, "
            f"{len(self.categories)} categories, {len(self.manufacturers)} manufacturers"
        )

    def search(self, query: Query) -> SearchResult:
        """
        Execute a query against the index.

        Raises:
            SearchBackendError: If the index has not been built
        """
        if not self.is_initialized:
            raise SearchBackendError("Catalog index not initialized. Call build_index() first.", term=query.term)

        tokens = self.tokenize(query.term)
        fields = [field for field in query.fields if field in self.field_tokens]
        if not tokens or not fields:
            return SearchResult()

        matches = [
            i
            for i in range(len(self.products))
            if all(any(token in self.field_tokens[field][i] for field in fields) for token in tokens)
            and self._in_entity(i, "category_ids", query.category_id)
            and self._in_entity(i, "manufacturer_ids", query.manufacturer_id)
        ]

        scores = self._score(tokens, fields, matches)
        ordered = self._sort(matches, scores, query.sort)
        page = ordered[query.offset : query.offset + query.limit]

        logger.debug(f"'{query.term}' on {fields}: {len(matches)} matches")

        return SearchResult(
            hits=[self._product_hit(i, scores[i]) for i in page],
            total_count=len(matches),
            spell_checker_suggestions=self._suggest(tokens, fields),
            top_categories=self._top_hits(ordered, "category_ids", self.categories),
            top_manufacturers=self._top_hits(ordered, "manufacturer_ids", self.manufacturers),
        )

    def _in_entity(self, index: int, key: str, entity_id: int | None) -> bool:
        """True when no filter is set or the product is assigned to the entity"""
        return entity_id is None or entity_id in (self.products[index].get(key) or [])

    def _score(self, tokens: list[str], fields: list[str], matches: list[int]) -> dict[int, float]:
        scores = {i: 0.0 for i in matches}
        if not matches:
            return scores

        for field in fields:
            if field not in self.field_indexes:
                continue
            field_scores = self.field_indexes[field].get_scores(tokens)
            for i in matches:
                scores[i] += float(field_scores[i])
        return scores

    def _sort(self, matches: list[int], scores: dict[int, float], sort: ProductSorting) -> list[int]:
        products = self.products

        if sort is ProductSorting.NAME_ASC:
            return sorted(matches, key=lambda i: str(products[i].get("name") or "").lower())
        if sort is ProductSorting.NAME_DESC:
            return sorted(matches, key=lambda i: str(products[i].get("name") or "").lower(), reverse=True)
        if sort is ProductSorting.PRICE_ASC:
            return sorted(matches, key=lambda i: products[i].get("price") or 0)
        if sort is ProductSorting.PRICE_DESC:
            return sorted(matches, key=lambda i: products[i].get("price") or 0, reverse=True)
        if sort is ProductSorting.CREATED_ON:
            return sorted(matches, key=lambda i: str(products[i].get("created_on") or ""), reverse=True)

        # Relevance, ties keep catalog order
        return sorted(matches, key=lambda i: -scores[i])

    def _suggest(self, tokens: list[str], fields: list[str]) -> list[str]:
        """
        Spell checker suggestions for the whole term.

        Each unknown token is replaced by its closest indexed tokens. No
        suggestions are made when every token is known or when an unknown
        token has no close match.
        """
        vocabulary = set().union(*(self.field_vocabulary[field] for field in fields))
        unknown = [token for token in dict.fromkeys(tokens) if token not in vocabulary]
        if not unknown or not vocabulary:
            return []

        choices = sorted(vocabulary)
        corrections = {}
        for token in unknown:
            candidates = process.extract(
                token,
                choices,
                scorer=fuzz.ratio,
                limit=self.max_suggestions,
                score_cutoff=self.min_similarity,
            )
            if not candidates:
                return []
            corrections[token] = [candidate for candidate, _score, _index in candidates]

        suggestions = []
        for rank in range(self.max_suggestions):
            corrected = [
                corrections[token][min(rank, len(corrections[token]) - 1)] if token in corrections else token
                for token in tokens
            ]
            suggestion = " ".join(corrected)
            if suggestion not in suggestions:
                suggestions.append(suggestion)

        return suggestions

    def _top_hits(self, ordered: list[int], key: str, entities: dict[int, dict[str, Any]]) -> list[SearchHit]:
        counts = Counter(
            entity_id
            for i in ordered
            for entity_id in self.products[i].get(key) or []
            if entity_id in entities
        )
        return [
            self._entity_hit(entities[entity_id], count)
            for entity_id, count in counts.most_common(self.top_hits_limit)
        ]

    def _product_hit(self, index: int, score: float) -> SearchHit:
        product = self.products[index]
        return SearchHit(
            entity_id=product["id"],
            fields={
                "name": product.get("name"),
                "shortdescription": product.get("shortdescription"),
                "sku": product.get("sku"),
                "price": product.get("price"),
            },
            localized=product.get("localized") or {},
            score=round(score, 4),
        )

    def _entity_hit(self, entity: dict[str, Any], count: int) -> SearchHit:
        return SearchHit(
            entity_id=entity["id"],
            fields={"name": entity.get("name")},
            localized=entity.get("localized") or {},
            score=float(count),
        )

    def get_stats(self) -> dict[str, Any]:
        """Get index statistics"""
        return {
            "is_initialized": self.is_initialized,
            "total_documents": len(self.products),
            "total_categories": len(self.categories),
            "total_manufacturers": len(self.manufacturers),
            "vocabulary_size": len(set().union(*self.field_vocabulary.values())) if self.field_vocabulary else 0,
        }


@lru_cache
def get_catalog_search_service() -> CatalogSearchService:
    """Get cached catalog search service instance"""
    return CatalogSearchService(
        max_suggestions=settings.SPELL_CHECKER_MAX_SUGGESTIONS,
        min_similarity=settings.SPELL_CHECKER_MIN_SIMILARITY,
        top_hits_limit=settings.TOP_HITS_LIMIT,
    )
