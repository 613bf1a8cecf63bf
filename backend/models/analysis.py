from pydantic import Field

from models.profile import CamelModel


class BodyAnalysis(CamelModel):
    gender: str = Field(min_length=1)
    fitness_level: str = Field(min_length=1)   # Beginner / Intermediate / Advanced
    body_fat: str = Field(min_length=1)
    weight_range: str = Field(min_length=1)
    posture: str = Field(min_length=1)         # Good / Average / Poor
