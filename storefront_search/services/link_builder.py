"""Route link construction for search hit items"""

from functools import lru_cache

from pydantic import BaseModel, ConfigDict
from starlette.datastructures import URL

from storefront_search.core.config import settings


class SearchRouteParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    term: str

    def to_query_params(self) -> dict[str, str]:
        return {"q": self.term}


class CategorySearchRouteParams(SearchRouteParams):
    category_id: int

    def to_query_params(self) -> dict[str, str]:
        return {"q": self.term, "c": str(self.category_id)}


class ManufacturerSearchRouteParams(SearchRouteParams):
    manufacturer_id: int

    def to_query_params(self) -> dict[str, str]:
        return {"q": self.term, "m": str(self.manufacturer_id)}


# route name -> (path, params type)
ROUTES: dict[str, tuple[str, type[SearchRouteParams]]] = {
    "Search": ("/search", SearchRouteParams),
    "SearchInCategory": ("/search", CategorySearchRouteParams),
    "SearchInManufacturer": ("/search", ManufacturerSearchRouteParams),
}


class LinkBuilder:
    """Builds relative URLs for named routes"""

    def __init__(self, prefix: str = ""):
        self.prefix = prefix.rstrip("/")

    def build_link(self, route_name: str, params: SearchRouteParams) -> str:
        if route_name not in ROUTES:
            raise ValueError(f"Unknown route: {route_name}")

        path, params_type = ROUTES[route_name]
        if type(params) is not params_type:
            raise ValueError(
                f"Route {route_name} expects {params_type.__name__}, got {type(params).__name__}"
            )

        url = URL(f"{self.prefix}{path}")
        return str(url.include_query_params(**params.to_query_params()))


@lru_cache
def get_link_builder() -> LinkBuilder:
    """Get cached link builder instance"""
    return LinkBuilder(prefix=settings.API_PREFIX)
