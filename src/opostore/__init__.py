"""opostore - client-side storefront state: cart, sync and shoe customizer."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("opostore")
except PackageNotFoundError:
    __version__ = "0+local"

from opostore.cart import (
    AddToCartForm,
    CartPage,
    CartStore,
    PendingUpdate,
    QuantityUpdater,
    compute_totals,
    deserialize_cart,
    serialize_cart,
)
from opostore.catalog import CatalogClient, ItemPageLoader, ItemPageResult
from opostore.config import StoreConfig
from opostore.context import ShopContext, open_storage
from opostore.customize import ColorPanel, CustomizationState, CustomizerScene, MeshNode, classify
from opostore.exceptions import (
    CatalogError,
    CatalogTransportError,
    OpoConfigError,
    OpoError,
    ProductNotFoundError,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from opostore.models import (
    CartLineItem,
    CartTotals,
    CustomizationSnapshot,
    PartColorMap,
    PartId,
    Product,
)
from opostore.storage import FileStorage, MemoryStorage, SharedStorageArea, StorageEvent, StorageHandle
from opostore.sync import CartCountBadge, CartSyncChannel

__all__ = [
    "__version__",
    "AddToCartForm",
    "CartCountBadge",
    "CartLineItem",
    "CartPage",
    "CartStore",
    "CartSyncChannel",
    "CartTotals",
    "CatalogClient",
    "CatalogError",
    "CatalogTransportError",
    "ColorPanel",
    "CustomizationSnapshot",
    "CustomizationState",
    "CustomizerScene",
    "FileStorage",
    "ItemPageLoader",
    "ItemPageResult",
    "MemoryStorage",
    "MeshNode",
    "OpoConfigError",
    "OpoError",
    "PartColorMap",
    "PartId",
    "PendingUpdate",
    "Product",
    "ProductNotFoundError",
    "QuantityUpdater",
    "SharedStorageArea",
    "ShopContext",
    "StorageError",
    "StorageEvent",
    "StorageHandle",
    "StorageReadError",
    "StorageWriteError",
    "StoreConfig",
    "classify",
    "compute_totals",
    "deserialize_cart",
    "open_storage",
    "serialize_cart",
]
