from enum import Enum

class PricingType(str, Enum):
    COST_BASED = "cost_based"
    FLAT_RATE = "flat_rate"
    PER_HOUR = "per_hour"

class FloorType(str, Enum):
    VCT = "vct"
    CARPET = "carpet"
    TILE = "tile"
    HARDWOOD = "hardwood"
    CONCRETE = "concrete"
    OTHER = "other"

class ConditionLevel(str, Enum):
    STANDARD = "standard"
    MEDIUM = "medium"
    HARD = "hard"

class BuildingType(str, Enum):
    OFFICE = "office"
    MEDICAL = "medical"
    INDUSTRIAL = "industrial"
    RETAIL = "retail"
    EDUCATIONAL = "educational"
    WAREHOUSE = "warehouse"
    RESIDENTIAL = "residential"
    MIXED = "mixed"
    OTHER = "other"

class TaskComplexity(str, Enum):
    STANDARD = "standard"
    SANITIZATION = "sanitization"
    BIOHAZARD = "biohazard"
    HIGH_SECURITY = "high_security"

class ServiceFrequency(str, Enum):
    ONE_X_WEEK = "1x_week"
    TWO_X_WEEK = "2x_week"
    THREE_X_WEEK = "3x_week"
    FOUR_X_WEEK = "4x_week"
    FIVE_X_WEEK = "5x_week"
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"

class TaskFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"
    AS_NEEDED = "as_needed"

class ReadinessReason(str, Enum):
    FACILITY_NOT_FOUND = "facility_not_found"
    NO_AREAS = "no_areas"
    NO_SQUARE_FOOTAGE = "no_square_footage"
