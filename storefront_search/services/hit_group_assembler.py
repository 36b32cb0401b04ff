"""Builds the named hit groups shown next to the product hits"""

from collections.abc import Callable, Sequence

from storefront_search.schemas.search import HitGroup, HitItem, SearchHit, SearchOutcome
from storefront_search.services.label_resolver import resolve_label
from storefront_search.services.link_builder import (
    CategorySearchRouteParams,
    LinkBuilder,
    ManufacturerSearchRouteParams,
    SearchRouteParams,
)
from storefront_search.services.localization import Translator

TOP_HITS_ORDINAL = -100


class HitGroupAssembler:
    """
    Turns suggestions and secondary hits of an outcome into HitGroups.

    Groups are emitted in construction order (spell checker, top categories,
    top manufacturers). Empty groups are skipped. The ordinal is advisory
    metadata for the renderer and is not used for sorting here.
    """

    def __init__(
        self,
        translator: Translator,
        link_builder: LinkBuilder,
        label_resolver: Callable[[SearchHit, str | None], str] = resolve_label,
    ):
        self.translator = translator
        self.link_builder = link_builder
        self.label_resolver = label_resolver

    def assemble_groups(self, outcome: SearchOutcome) -> list[HitGroup]:
        language_code = outcome.language_code
        term = outcome.term
        groups: list[HitGroup] = []

        # Add spell checker suggestions (if any)
        self._add_group(
            groups,
            name="SpellChecker",
            display_name=self.translator.translate("Search.DidYouMean", language_code=language_code),
            items=[
                HitItem(
                    label=suggestion,
                    url=self.link_builder.build_link("Search", SearchRouteParams(term=suggestion)),
                )
                for suggestion in outcome.result.spell_checker_suggestions
            ],
        )

        # Add top hits (if any)
        self._add_group(
            groups,
            name="TopCategories",
            display_name=self.translator.translate("Search.TopCategories", language_code=language_code),
            items=self._top_hit_items(
                outcome.result.top_categories,
                language_code,
                lambda hit: self.link_builder.build_link(
                    "SearchInCategory",
                    CategorySearchRouteParams(term=term, category_id=hit.entity_id),
                ),
            ),
        )
        self._add_group(
            groups,
            name="TopManufacturers",
            display_name=self.translator.translate("Search.TopManufacturers", language_code=language_code),
            items=self._top_hit_items(
                outcome.result.top_manufacturers,
                language_code,
                lambda hit: self.link_builder.build_link(
                    "SearchInManufacturer",
                    ManufacturerSearchRouteParams(term=term, manufacturer_id=hit.entity_id),
                ),
            ),
        )

        return groups

    def _top_hit_items(
        self,
        hits: Sequence[SearchHit],
        language_code: str | None,
        link: Callable[[SearchHit], str],
    ) -> list[HitItem]:
        return [HitItem(label=self.label_resolver(hit, language_code), url=link(hit)) for hit in hits]

    @staticmethod
    def _add_group(groups: list[HitGroup], name: str, display_name: str, items: list[HitItem]) -> None:
        if not items:
            return
        groups.append(HitGroup(name=name, display_name=display_name, ordinal=TOP_HITS_ORDINAL, hits=items))
