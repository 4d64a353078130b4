"""Sample data for local development and demos."""

from __future__ import annotations

import logging
import random
from dataclasses import asdict, dataclass
from datetime import UTC, datetime, timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session

from .api_types import SeedSummary
from .models import Advocate, Location, Specialty

log = logging.getLogger(__name__)

SPECIALTIES: tuple[str, ...] = (
    "Bipolar",
    "LGBTQ",
    "Medication/Prescribing",
    "Suicide History/Attempts",
    "General Mental Health (anxiety, depression, stress, grief, life transitions)",
    "Men's issues",
    "Relationship Issues (family, friends, couple, etc)",
    "Trauma & PTSD",
    "Personality disorders",
    "Personal growth",
    "Substance use/abuse",
    "Pediatrics",
    "Women's issues (post-partum, infertility, family planning)",
    "Chronic pain",
    "Weight loss & nutrition",
    "Eating disorders",
    "Diabetic Diet and nutrition",
    "Coaching (leadership, career, academic and wellness)",
    "Life coaching",
    "Obsessive-compulsive disorders",
    "Neuropsychological evaluations & testing (ADHD testing)",
    "Attention and Hyperactivity (ADHD)",
    "Sleep issues",
    "Schizophrenia and psychotic disorders",
    "Learning disorders",
    "Domestic abuse",
)

# (first, last, degree, years, phone, city)
ADVOCATES: tuple[tuple[str, str, str, int, int, str], ...] = (
    ("John", "Doe", "MD", 10, 5551234567, "New York"),
    ("Jane", "Smith", "PhD", 8, 5559876543, "Los Angeles"),
    ("Alice", "Johnson", "MSW", 5, 5554567890, "Chicago"),
    ("Michael", "Brown", "MD", 12, 5556543210, "Houston"),
    ("Emily", "Davis", "PhD", 7, 5553210987, "Phoenix"),
    ("Chris", "Martinez", "MSW", 9, 5557890123, "Philadelphia"),
    ("Jessica", "Taylor", "MD", 11, 5554561234, "San Antonio"),
    ("David", "Harris", "PhD", 6, 5557896543, "San Diego"),
    ("Laura", "Clark", "MSW", 4, 5550123456, "Dallas"),
    ("Daniel", "Lewis", "MD", 13, 5553217654, "San Jose"),
    ("Sarah", "Lee", "PhD", 10, 5551238765, "Austin"),
    ("James", "King", "MSW", 5, 5556540987, "Jacksonville"),
    ("Megan", "Green", "MD", 14, 5559873456, "San Francisco"),
    ("Joshua", "Walker", "PhD", 9, 5556781234, "Columbus"),
    ("Amanda", "Hall", "MSW", 3, 5559872345, "Fort Worth"),
)

# slices start within the first 24 names
_SLICE_SPAN = 24


@dataclass
class SeedResult:
    advocates: int
    specialties: int
    locations: int
    relationships: int

    def to_summary(self) -> SeedSummary:
        return SeedSummary(**asdict(self))  # type: ignore[typeddict-item]


def pick_specialties(rng: random.Random) -> list[str]:
    """A non-empty contiguous run of specialty names."""
    start = rng.randrange(_SLICE_SPAN)
    end = rng.randrange(_SLICE_SPAN - start) + start + 1
    return list(SPECIALTIES[start:end])


def seed_database(session: Session, rng: random.Random | None = None) -> SeedResult:
    """Insert the sample advocates; specialties are created only if absent.

    The caller owns the transaction boundary; this function flushes but does
    not commit.
    """
    rng = rng or random.Random()

    existing = {s.name: s for s in session.scalars(select(Specialty)).all()}
    created_specialties = 0
    for name in SPECIALTIES:
        if name not in existing:
            specialty = Specialty(name=name)
            session.add(specialty)
            existing[name] = specialty
            created_specialties += 1

    base = datetime.now(UTC)
    relationships = 0
    for index, (first, last, degree, years, phone, city) in enumerate(ADVOCATES):
        stamp = base + timedelta(seconds=index)
        advocate = Advocate(
            first_name=first,
            last_name=last,
            degree=degree,
            years_of_experience=years,
            phone_number=phone,
            created_at=stamp,
            updated_at=stamp,
        )
        advocate.locations.append(Location(city=city, state="", country="United States", created_at=stamp))
        chosen = pick_specialties(rng)
        advocate.specialties.extend(existing[name] for name in chosen)
        relationships += len(chosen)
        session.add(advocate)

    session.flush()
    result = SeedResult(
        advocates=len(ADVOCATES),
        specialties=created_specialties,
        locations=len(ADVOCATES),
        relationships=relationships,
    )
    log.info("Seeded advocates=%d specialties=%d relationships=%d", result.advocates, result.specialties, result.relationships)
    return result


__all__ = ["ADVOCATES", "SPECIALTIES", "SeedResult", "pick_specialties", "seed_database"]
