"""Application-wide constants and configuration values.

Centralizes magic numbers so pricing and transport rules live in one place.
"""

# ============== PRICING ==============
DELIVERY_FEE = 20
DISCOUNT_THRESHOLD = 200  # discount applies strictly above this subtotal
DISCOUNT_AMOUNT = 30  # flat

# ============== CART ==============
MIN_QUANTITY = 1

# ============== API ==============
DEFAULT_API_URL = "https://testing-backend-akshaya.vercel.app/api"
API_TIMEOUT_SECONDS = 60  # serverless backend can be slow on cold starts

# ============== CHECKOUT DEFAULTS ==============
ADDRESS_PLACEHOLDER = "Address not provided"
ASAP_TIME_LABEL = "ASAP"
SCHEDULED_TIME_LABEL = "Scheduled"
DEFAULT_ITEM_NAME = "Item"

# ============== CALENDAR ==============
WEEKDAYS = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

# ============== SESSION KEYS ==============
SESSION_USER_KEY = "user"
SESSION_TOKEN_KEY = "token"
