from models.analysis import BodyAnalysis
from models.outcome import Classification, Failure, InvocationOutcome, Success
from models.plan import DietPlan, Exercise, GenerateResponse, Meal, WorkoutDay
from models.profile import UserData

__all__ = [
    "BodyAnalysis",
    "Classification",
    "DietPlan",
    "Exercise",
    "Failure",
    "GenerateResponse",
    "InvocationOutcome",
    "Meal",
    "Success",
    "UserData",
    "WorkoutDay",
]
