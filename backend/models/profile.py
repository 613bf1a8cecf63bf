from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire (the frontend's shape)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class UserData(CamelModel):
    name: str = Field(min_length=1)
    age: int = Field(gt=0, lt=130)
    gender: str = Field(min_length=1)
    height: float = Field(gt=0)          # cm
    weight: float = Field(gt=0)          # kg
    fitness_goal: str = Field(min_length=1)
    fitness_level: str = Field(min_length=1)
    workout_location: str = Field(min_length=1)
    dietary_preferences: str = Field(min_length=1)
    medical_issues: Optional[str] = None
    stress_level: int = Field(ge=1, le=10)

    @property
    def bmi(self) -> float:
        return round(self.weight / (self.height / 100) ** 2, 1)
