from enum import Enum


class ServiceType(str, Enum):
    VAN_ONLY = "van-only"
    MAN_AND_VAN = "man-and-van"
    TWO_PERSON = "two-person"
    VAN_WITH_2_MEN = "van-with-2-men"
    LARGE_VAN = "large-van"
    PREMIUM = "premium"

    def __str__(self):
        return self.value


class DemandLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    def __str__(self):
        return self.value


class SlotPeriod(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"

    def __str__(self):
        return self.value


class PromoKind(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"
    FREE_SERVICE = "free_service"

    def __str__(self):
        return self.value
