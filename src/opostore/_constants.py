"""Internal constants shared across the library."""

CART_STORAGE_KEY = "cart"
CART_UPDATED_EVENT = "cartUpdated"

# ------------------------------------------------------------------
# Shipping rule (amounts in won)
# ------------------------------------------------------------------

FREE_SHIPPING_THRESHOLD = 50_000
FLAT_SHIPPING_FEE = 3_000

# ------------------------------------------------------------------
# Cart UI timings (seconds)
# ------------------------------------------------------------------

QUANTITY_UPDATE_DELAY = 0.2
ADDED_FEEDBACK_SECONDS = 2.0

# Badge shows "99+" above this.
BADGE_COUNT_CAP = 99

# ------------------------------------------------------------------
# Catalog
# ------------------------------------------------------------------

CATALOG_TABLE = "items"
REVALIDATE_SECONDS = 3600
PLACEHOLDER_IMAGE = "/images/placeholder.jpg"
PRICE_PLACEHOLDER = "Contact for price"
DESCRIPTION_PLACEHOLDER = "No description available"
USER_AGENT = "opostore/0.1"

# ------------------------------------------------------------------
# Customizer colors
# ------------------------------------------------------------------

DEFAULT_PART_COLOR = "#ffffff"
MAIN_PART_COLOR = "#fbe5bf"
MODEL_ASSET_PATH = "/models/shoe-draco.glb"
