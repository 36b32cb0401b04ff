"""
End-to-end search flow: normalize, execute, retry once with a spell correction, assemble.
"""

import logging
from collections.abc import Callable
from enum import Enum

from storefront_search.core.config import SearchConfig
from storefront_search.schemas.search import (
    CatalogSearchQuery,
    Query,
    SearchMode,
    SearchOutcome,
    SearchResult,
    ValidationFailure,
)
from storefront_search.services.hit_group_assembler import HitGroupAssembler
from storefront_search.services.query_normalizer import normalize

logger = logging.getLogger(__name__)


class SearchState(str, Enum):
    SEARCHED = "searched"
    RETRY_PENDING = "retry_pending"
    DONE = "done"


def _has_hits(result: SearchResult) -> bool:
    return bool(result.hits) or result.total_count > 0


class SearchOrchestrator:
    """
    Drives a single search request.

    The implicit spell correction is modelled as a state machine:

        SEARCHED -> DONE
        SEARCHED -> RETRY_PENDING -> SEARCHED -> DONE

    RETRY_PENDING is only reachable while no retry has happened yet, so a
    request never triggers more than two backend calls. Backend errors are
    not caught here.
    """

    def __init__(
        self,
        search: Callable[[Query], SearchResult],
        assembler: HitGroupAssembler,
        config: SearchConfig,
    ):
        self.search = search
        self.assembler = assembler
        self.config = config

    def run(self, raw_query: CatalogSearchQuery, mode: SearchMode) -> SearchOutcome | ValidationFailure:
        """Normalize, execute and assemble in one go"""
        query = normalize(raw_query, mode, self.config)
        if isinstance(query, ValidationFailure):
            return query

        return self.assemble(self.execute(query, mode))

    def execute(self, query: Query, mode: SearchMode) -> SearchOutcome:
        """
        Execute the query and, in full mode, retry once with the top suggestion.

        When the first search has no hits but the backend suggested
        corrections, the first suggestion is searched instead. If that finds
        something, the original term becomes the attempted term and the
        applied suggestion is removed from the displayed suggestions.
        Otherwise the original term and the original (empty) result are kept.
        """
        original_result = self.search(query)

        searched_query = query
        result = original_result
        attempted_term = None
        retried = False
        state = SearchState.SEARCHED

        while state is not SearchState.DONE:
            if state is SearchState.SEARCHED:
                if not retried and self._should_retry(original_result, mode):
                    state = SearchState.RETRY_PENDING
                else:
                    state = SearchState.DONE

            elif state is SearchState.RETRY_PENDING:
                retried = True
                suggestions = original_result.spell_checker_suggestions
                corrected_query = query.with_term(suggestions[0])

                logger.info(f"No hits for '{query.term}', searching again with '{corrected_query.term}'")
                retry_result = self.search(corrected_query)

                if _has_hits(retry_result):
                    searched_query = corrected_query
                    attempted_term = query.term
                    result = retry_result.model_copy(
                        update={
                            "spell_checker_suggestions": [
                                s for s in suggestions if s != corrected_query.term
                            ]
                        }
                    )
                else:
                    logger.info(f"Retry with '{corrected_query.term}' found nothing, keeping '{query.term}'")

                state = SearchState.SEARCHED

        return SearchOutcome(
            query=searched_query,
            term=searched_query.term,
            attempted_term=attempted_term,
            total_count=result.total_count,
            result=result,
            retried=retried,
        )

    def assemble(self, outcome: SearchOutcome) -> SearchOutcome:
        """Attach hit groups to an executed outcome"""
        return outcome.model_copy(update={"hit_groups": self.assembler.assemble_groups(outcome)})

    def _should_retry(self, result: SearchResult, mode: SearchMode) -> bool:
        return (
            mode is SearchMode.FULL
            and self.config.spell_check_retry_enabled
            and not _has_hits(result)
            and bool(result.spell_checker_suggestions)
        )
