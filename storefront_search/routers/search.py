from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, Response

from storefront_search.schemas.search import (
    CatalogSearchQuery,
    InstantSearchResponse,
    ProductSorting,
    SearchBoxModel,
    SearchResponse,
)
from storefront_search.services.search_service import SearchService, get_search_service

router = APIRouter(prefix="/search", tags=["search"])


@router.get("/box", response_model=SearchBoxModel)
async def search_box(
    q: str | None = Query(default=None, description="Current search term"),
    service: SearchService = Depends(get_search_service),
):
    """Settings the search box needs to render itself."""
    return service.get_search_box_model(current_query=q)


@router.post("/instant", response_model=InstantSearchResponse)
async def instant_search(
    query: CatalogSearchQuery,
    service: SearchService = Depends(get_search_service),
):
    """
    Instant search while the user types.

    Searches name, short description and tags (plus sku when sku search is
    enabled), returns at most 16 products by relevance together with spell
    checker suggestions, top categories and top manufacturers.

    A missing or too short term returns an empty 200 response.

    📝 **Example:**
        ```json
        {"term": "shoes", "language_code": "en"}
        ```
    """
    try:
        result = await service.instant_search(query)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Search failed: {str(e)}") from e

    if result is None:
        return Response(content="")
    return result


@router.get("", response_model=SearchResponse)
async def search(
    request: Request,
    q: str | None = Query(default=None, description="Search term"),
    f: list[str] = Query(default=[], description="Fields to search in (can be repeated)"),
    offset: int = Query(default=0, ge=0),
    limit: int | None = Query(default=None, ge=1),
    sort: ProductSorting | None = None,
    lang: str | None = Query(default=None, description="Language SEO code"),
    c: int | None = Query(default=None, description="Category id to search in"),
    m: int | None = Query(default=None, description="Manufacturer id to search in"),
    x_customer_id: str | None = Header(default=None),
    service: SearchService = Depends(get_search_service),
):
    """
    Full catalog search.

    When nothing is found but the spell checker has suggestions, the first
    suggestion is searched instead; `attempted_term` then holds the term the
    user typed. A too short term returns a response with `error` set.

    Use: ?q=shoes&f=name&f=sku&limit=24&sort=price_asc
    Narrow to a category or manufacturer: ?q=shoes&c=11 or ?q=shoes&m=20
    """
    raw_query = CatalogSearchQuery(
        term=q,
        fields=f,
        offset=offset,
        limit=limit,
        sort=sort,
        language_code=lang,
        category_id=c,
        manufacturer_id=m,
    )
    try:
        return await service.search(raw_query, customer_id=x_customer_id, page_url=str(request.url))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Search failed: {str(e)}") from e


@router.get("/health")
async def search_health(service: SearchService = Depends(get_search_service)):
    """Check if search service is healthy"""
    try:
        return service.get_health_status()
    except Exception as e:
        return {"status": "unhealthy", "error": str(e)}
