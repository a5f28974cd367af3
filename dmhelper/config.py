# dmhelper/config.py
import os
from datetime import timedelta

from pydantic import BaseModel, Field

# Config (from env or edit here for quick testing)
DEFAULT_HOST = "products.dm.de"
DEFAULT_REGION = "DE"
PRODUCT_URL_TEMPLATE = "https://{host}/product/{region}/products/detail/gtin/{identifier}"


class Settings(BaseModel):
    host: str = DEFAULT_HOST
    region: str = DEFAULT_REGION
    cache_ttl_minutes: float = Field(default=30, gt=0)
    timeout: float = Field(default=10, gt=0)
    exchange_rate: float = Field(default=4.34, gt=0)
    log_level: str = "WARNING"

    @property
    def cache_ttl(self) -> timedelta:
        return timedelta(minutes=self.cache_ttl_minutes)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            host=os.getenv("DMHELPER_HOST", DEFAULT_HOST),
            region=os.getenv("DMHELPER_REGION", DEFAULT_REGION),
            cache_ttl_minutes=os.getenv("DMHELPER_CACHE_TTL_MINUTES", "30"),
            timeout=os.getenv("DMHELPER_TIMEOUT", "10"),
            exchange_rate=os.getenv("DMHELPER_EXCHANGE_RATE", "4.34"),
            log_level=os.getenv("DMHELPER_LOG_LEVEL", "WARNING").upper(),
        )


def build_product_url(identifier: str, settings: Settings) -> str:
    return PRODUCT_URL_TEMPLATE.format(
        host=settings.host, region=settings.region, identifier=identifier
    )
