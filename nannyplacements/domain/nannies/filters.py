"""Browse filters for workers - parsing and the in-Python checks SQL can't express portably"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ...models import Client, Nanny

# Age range label -> inclusive (min, max) years
AGE_RANGES = {
    "20-25": (20, 25),
    "25-30": (25, 30),
    "30-35": (30, 35),
    "35-40": (35, 40),
    "40-45": (40, 45),
    "45-50": (45, 50),
    "50-55": (50, 55),
}

CLEANER_EXPERIENCE_TYPES = ("cleaning", "both")


def normalize(value: Optional[str]) -> Optional[str]:
    """Blank and "all" both mean "no filter" """
    if value is None:
        return None
    value = value.strip()
    if not value or value.lower() == "all":
        return None
    return value


def parse_languages(value) -> list[str]:
    """Accept a list or a comma-separated string of languages"""
    if not value:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [lang.strip() for lang in value if lang and lang.strip() and lang.strip().lower() != "all"]


def calculate_age(date_of_birth: Optional[date], today: Optional[date] = None) -> Optional[int]:
    if not date_of_birth:
        return None
    today = today or date.today()
    years = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        years -= 1
    return years


@dataclass
class NannyFilters:
    city: Optional[str] = None
    experience_type: Optional[str] = None
    employment_type: Optional[str] = None
    accommodation: Optional[str] = None
    max_rate: Optional[float] = None
    languages: list[str] = field(default_factory=list)
    education: Optional[str] = None
    experience_duration: Optional[int] = None
    age_range: Optional[str] = None

    def __post_init__(self):
        self.city = normalize(self.city)
        self.experience_type = normalize(self.experience_type)
        self.employment_type = normalize(self.employment_type)
        self.accommodation = normalize(self.accommodation)
        self.education = normalize(self.education)
        self.age_range = normalize(self.age_range)
        self.languages = parse_languages(self.languages)
        if self.age_range and self.age_range not in AGE_RANGES:
            raise ValueError(f"Unknown age range. Use one of: {', '.join(AGE_RANGES)}")

    @classmethod
    def from_client_preferences(cls, client: Client) -> "NannyFilters":
        """Filters derived from a client's saved preferences, used for auto-matching"""
        return cls(
            experience_type=client.preferred_experience_type,
            employment_type=client.preferred_employment_type,
            accommodation=client.preferred_accommodation_type,
        )

    def as_dict(self) -> dict:
        return {
            key: value
            for key, value in self.__dict__.items()
            if value not in (None, [], "")
        }


def matches_in_memory(nanny: Nanny, filters: NannyFilters, today: Optional[date] = None) -> bool:
    """Checks on JSON languages and derived age, applied after the SQL query"""
    if filters.languages:
        spoken = set(nanny.languages or [])
        if not all(lang in spoken for lang in filters.languages):
            return False

    if filters.age_range:
        age = calculate_age(nanny.date_of_birth, today)
        if age is None:
            return False
        low, high = AGE_RANGES[filters.age_range]
        if not low <= age <= high:
            return False

    return True
