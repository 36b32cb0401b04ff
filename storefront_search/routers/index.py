import logging

from fastapi import APIRouter, Depends, HTTPException

from storefront_search.schemas.search import IndexStats
from storefront_search.services.search_service import SearchService, get_search_service

router = APIRouter(prefix="/index", tags=["index"])
logger = logging.getLogger(__name__)


@router.post("/rebuild", response_model=IndexStats)
async def rebuild_index(service: SearchService = Depends(get_search_service)):
    """
    Reload products, categories and manufacturers from MongoDB and rebuild
    the search index.

    Searches keep using the previous index until the new one is complete.
    """
    try:
        stats = await service.rebuild_index()
    except Exception as e:
        logger.error(f"❌ Index rebuild failed: {e}")
        raise HTTPException(status_code=500, detail=f"Index rebuild failed: {str(e)}") from e

    logger.info(f"✅ Index rebuilt: {stats['total_documents']} products")
    return IndexStats(**stats)


@router.get("/stats", response_model=IndexStats)
async def index_stats(service: SearchService = Depends(get_search_service)):
    """Get search index statistics"""
    return IndexStats(**service.catalog_search.get_stats())
