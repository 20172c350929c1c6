from pydantic import Field, field_validator
from typing import List, Literal, Optional

from .base import BaseGolfModel

HolesPlayed = Literal["all18", "front9", "back9"]


class TeeHole(BaseGolfModel):
    """Course authority data for one hole on a tee."""
    number: int = Field(..., ge=1, le=18)
    par: int = Field(..., ge=3, le=6)
    length: Optional[int] = Field(None, ge=0)
    handicap: int = Field(..., ge=1, le=18)  # stroke index, 1 = hardest


class TeeRating(BaseGolfModel):
    """Rating record for a nine or the full eighteen."""
    course_rating: float = Field(..., ge=25.0, le=85.0)
    slope_rating: float = Field(..., ge=55, le=155)
    bogey_rating: Optional[float] = None


class TeeRatings(BaseGolfModel):
    total: Optional[TeeRating] = None
    front: Optional[TeeRating] = None
    back: Optional[TeeRating] = None


class Tee(BaseGolfModel):
    """Tee set with its hole ratings. Read-only to the scoring engine."""
    id: Optional[str] = None
    name: Optional[str] = None
    gender: Optional[Literal["M", "F", "Mixed"]] = None
    holes: List[TeeHole] = Field(default_factory=list)
    ratings: TeeRatings = Field(default_factory=TeeRatings)

    @field_validator('holes')
    @classmethod
    def validate_hole_numbers(cls, v):
        numbers = [h.number for h in v]
        if len(numbers) != len(set(numbers)):
            raise ValueError("Hole numbers must be unique on a tee")
        return sorted(v, key=lambda h: h.number)

    def get_hole(self, number: int) -> Optional[TeeHole]:
        """Get a hole by its number (1-18)."""
        for hole in self.holes:
            if hole.number == number:
                return hole
        return None

    @property
    def stroke_indices(self) -> dict:
        """Mapping of hole number to stroke index."""
        return {h.number: h.handicap for h in self.holes}

    @property
    def stroke_indices_valid(self) -> bool:
        """True when the stroke indices are a permutation of 1..N."""
        indices = sorted(h.handicap for h in self.holes)
        return bool(indices) and indices == list(range(1, len(indices) + 1))

    @property
    def front_nine_par(self) -> Optional[int]:
        front = [h.par for h in self.holes if h.number <= 9]
        return sum(front) if front else None

    @property
    def back_nine_par(self) -> Optional[int]:
        back = [h.par for h in self.holes if h.number >= 10]
        return sum(back) if back else None

    @property
    def total_par(self) -> Optional[int]:
        return sum(h.par for h in self.holes) if self.holes else None

    def get_rating(self, holes_played: HolesPlayed = "all18") -> Optional[TeeRating]:
        """Rating record matching the holes played."""
        if holes_played == "front9":
            return self.ratings.front
        if holes_played == "back9":
            return self.ratings.back
        return self.ratings.total
