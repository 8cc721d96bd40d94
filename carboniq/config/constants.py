"""
Constants, enums, and static values.
"""

from enum import Enum


class VerificationStatus(str, Enum):
    """Lifecycle of a stored farm record."""

    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class MarketplaceSort(str, Enum):
    """Sort orders offered by the marketplace listing."""

    NEWEST = "newest"
    CREDITS_HIGH = "credits-high"
    CREDITS_LOW = "credits-low"
    CONFIDENCE = "confidence"


class SubmissionStep(int, Enum):
    """Steps of the farm submission form."""

    BASIC_INFO = 1
    LOCATION = 2
    PRACTICES = 3


# Verification thresholds
MIN_LAND_SIZE_HECTARES = 0.5
MIN_FARMING_PRACTICES = 2
LOW_CARBON_CROPS = frozenset({"Cotton", "Tobacco"})
IMAGERY_REJECTION_RATE = 0.1

# Credit scoring
CREDITS_PER_HECTARE = 0.5
PRACTICE_BONUS = 0.1
CONFIDENCE_FLOOR = 0.85
CONFIDENCE_SPAN = 0.1

# Rejection reasons, in evaluation order
REASON_LAND_SIZE = "Land size too small (minimum 0.5 hectares required)"
REASON_LAND_SIZE_INVALID = "Land size is not a valid number of hectares"
REASON_PRACTICES = "Insufficient sustainable farming practices (minimum 2 required)"
REASON_LOW_CARBON_CROP = "Selected crops have low carbon sequestration potential"
REASON_COORDINATES = "Invalid or missing GPS coordinates"
REASON_IMAGERY = "Satellite imagery analysis shows inconsistent land use patterns"

CROP_TYPES = (
    "Maize", "Wheat", "Rice", "Soybeans", "Barley", "Oats", "Sorghum", "Millet",
    "Cassava", "Sweet Potato", "Yam", "Plantain", "Banana", "Coffee", "Cocoa",
    "Tea", "Sugar Cane", "Cotton", "Tobacco", "Vegetables", "Fruits", "Other",
)

FARMING_PRACTICES = (
    "No-till farming", "Cover cropping", "Crop rotation", "Agroforestry",
    "Organic farming", "Integrated pest management", "Composting",
    "Water conservation", "Soil conservation", "Silvopasture",
    "Rotational grazing", "Biochar application", "Green manuring",
)

# Listings
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200
