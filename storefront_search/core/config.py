from functools import lru_cache

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    APP_NAME: str = "Storefront Search API"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    API_PREFIX: str = "/api/v1"

    # MongoDB settings
    MONGO_URL: str = "mongodb://localhost:27017"
    MONGO_DB_NAME: str = "storefront"

    # Collection names
    PRODUCTS_COLLECTION: str = "products"
    CATEGORIES_COLLECTION: str = "categories"
    MANUFACTURERS_COLLECTION: str = "manufacturers"
    GENERIC_ATTRIBUTES_COLLECTION: str = "generic_attributes"

    STORE_ID: int = 1
    DEFAULT_LANGUAGE: str = "en"

    # Instant search settings
    INSTANT_SEARCH_ENABLED: bool = True
    SHOW_PRODUCT_IMAGES_IN_INSTANT_SEARCH: bool = True
    INSTANT_SEARCH_TERM_MIN_LENGTH: int = 2
    INSTANT_SEARCH_NUMBER_OF_PRODUCTS: int = 10

    # Search settings
    SEARCH_FIELDS: list[str] = ["name", "shortdescription", "tagname", "sku"]
    DEFAULT_PAGE_SIZE: int = 24
    MAX_PAGE_SIZE: int = 120
    SPELL_CHECK_RETRY_ENABLED: bool = True  # Implicitly search again with the first suggestion
    SPELL_CHECKER_MAX_SUGGESTIONS: int = 4
    SPELL_CHECKER_MIN_SIMILARITY: float = 75.0  # rapidfuzz ratio, 0-100
    TOP_HITS_LIMIT: int = 5  # Max items in top categories / top manufacturers


class SearchConfig(BaseModel):
    """Immutable snapshot of the settings that drive the search flow."""

    model_config = ConfigDict(frozen=True)

    search_term_min_length: int = 2
    instant_search_number_of_products: int = 10
    search_fields: tuple[str, ...] = ("name", "shortdescription", "tagname", "sku")
    default_page_size: int = 24
    max_page_size: int = 120
    spell_check_retry_enabled: bool = True
    instant_search_enabled: bool = True
    show_product_images_in_instant_search: bool = True

    @classmethod
    def from_settings(cls, source: Settings) -> "SearchConfig":
        return cls(
            search_term_min_length=source.INSTANT_SEARCH_TERM_MIN_LENGTH,
            instant_search_number_of_products=source.INSTANT_SEARCH_NUMBER_OF_PRODUCTS,
            search_fields=tuple(source.SEARCH_FIELDS),
            default_page_size=source.DEFAULT_PAGE_SIZE,
            max_page_size=source.MAX_PAGE_SIZE,
            spell_check_retry_enabled=source.SPELL_CHECK_RETRY_ENABLED,
            instant_search_enabled=source.INSTANT_SEARCH_ENABLED,
            show_product_images_in_instant_search=source.SHOW_PRODUCT_IMAGES_IN_INSTANT_SEARCH,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()


@lru_cache
def get_search_config() -> SearchConfig:
    return SearchConfig.from_settings(get_settings())


settings = get_settings()
