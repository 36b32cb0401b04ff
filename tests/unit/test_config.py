"""Settings to SearchConfig mapping."""

import pytest
from pydantic import ValidationError

from storefront_search.core.config import SearchConfig, Settings


def test_search_config_from_settings() -> None:
    source = Settings(
        INSTANT_SEARCH_TERM_MIN_LENGTH=3,
        INSTANT_SEARCH_NUMBER_OF_PRODUCTS=8,
        SEARCH_FIELDS=["name", "tagname"],
        MAX_PAGE_SIZE=60,
        SPELL_CHECK_RETRY_ENABLED=False,
        INSTANT_SEARCH_ENABLED=False,
        SHOW_PRODUCT_IMAGES_IN_INSTANT_SEARCH=False,
    )
    config = SearchConfig.from_settings(source)

    assert config.search_term_min_length == 3
    assert config.instant_search_number_of_products == 8
    assert config.search_fields == ("name", "tagname")
    assert config.max_page_size == 60
    assert config.spell_check_retry_enabled is False
    assert config.instant_search_enabled is False
    assert config.show_product_images_in_instant_search is False


def test_search_config_is_immutable() -> None:
    config = SearchConfig()
    with pytest.raises(ValidationError):
        config.search_term_min_length = 1
