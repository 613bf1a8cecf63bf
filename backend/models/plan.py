from typing import Optional, Union

from pydantic import Field

from models.profile import CamelModel


class Exercise(CamelModel):
    name: str
    sets: Union[int, str]
    reps: Union[int, str]       # LLMs sometimes answer "12-15" or "Max"
    rest: Union[int, str] = ""  # "60 seconds" or just 60


class WorkoutDay(CamelModel):
    day: str
    exercises: list[Exercise] = Field(default_factory=list)


class Meal(CamelModel):
    name: str
    description: Optional[str] = None
    calories: Union[int, float, str]
    protein: Union[int, float, str]
    carbs: Union[int, float, str]
    fats: Union[int, float, str]


class DietPlan(CamelModel):
    breakfast: Meal
    lunch: Meal
    dinner: Meal
    snacks: list[Meal] = Field(default_factory=list)


class GenerateResponse(CamelModel):
    workout_plan: list[WorkoutDay] = Field(min_length=1)
    diet_plan: DietPlan
    ai_tips: list[str] = Field(default_factory=list)
    motivation_quote: str = ""
