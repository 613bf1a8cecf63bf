"""
Prompt builders for the Gemini endpoints.

Kept apart from the routes for readability and easier iteration.
"""

from classification import ItemKind
from models.profile import UserData

PLAN_JSON_SHAPE = """
{
  "workoutPlan": [
    {
      "day": "Monday",
      "exercises": [
        {"name": "Exercise Name", "sets": 3, "reps": 12, "rest": "60 seconds"}
      ]
    }
  ],
  "dietPlan": {
    "breakfast": {"name": "Meal Name", "description": "Brief description", "calories": 350, "protein": "20g", "carbs": "45g", "fats": "8g"},
    "lunch": {"name": "Meal Name", "description": "Brief description", "calories": 450, "protein": "35g", "carbs": "30g", "fats": "15g"},
    "dinner": {"name": "Meal Name", "description": "Brief description", "calories": 500, "protein": "40g", "carbs": "25g", "fats": "20g"},
    "snacks": [
      {"name": "Snack Name", "description": "Brief description", "calories": 150, "protein": "10g", "carbs": "15g", "fats": "5g"}
    ]
  },
  "aiTips": ["Tip 1", "Tip 2", "Tip 3", "Tip 4", "Tip 5"],
  "motivationQuote": "An inspiring quote here"
}
""".strip()

JSON_RULES = """
CRITICAL JSON REQUIREMENTS:
- Return ONLY valid JSON - no markdown, no explanations, no text before or after
- All strings and property names must use double quotes
- Escape any quotes inside strings with a backslash
- No trailing commas before } or ]
- Numbers must be numbers, except "protein", "carbs" and "fats" which are strings like "20g"
""".strip()


def plan_prompt(user: UserData) -> str:
    medical = f"- Medical Issues: {user.medical_issues}\n" if user.medical_issues else ""
    medical_note = f"- Take into account: {user.medical_issues}\n" if user.medical_issues else ""
    return (
        "You are an expert fitness coach and nutritionist. Generate a personalized "
        "fitness plan based on the following user information.\n\n"
        "USER PROFILE:\n"
        f"- Name: {user.name}\n"
        f"- Age: {user.age} years\n"
        f"- Gender: {user.gender}\n"
        f"- Height: {user.height:g} cm\n"
        f"- Weight: {user.weight:g} kg\n"
        f"- BMI: {user.bmi}\n"
        f"- Fitness Goal: {user.fitness_goal}\n"
        f"- Fitness Level: {user.fitness_level}\n"
        f"- Workout Location: {user.workout_location}\n"
        f"- Dietary Preferences: {user.dietary_preferences}\n"
        f"- Stress Level: {user.stress_level}/10\n"
        f"{medical}\n"
        "INSTRUCTIONS:\n"
        f"1. Create a 7-day workout plan appropriate for {user.fitness_level} level\n"
        f"2. Design a daily meal plan that aligns with {user.dietary_preferences}\n"
        f"3. Provide 5 practical AI tips for achieving {user.fitness_goal}\n"
        "4. Generate an inspiring motivation quote\n\n"
        "OUTPUT FORMAT (respond ONLY with valid JSON, no markdown, no explanations):\n\n"
        f"{PLAN_JSON_SHAPE}\n\n"
        f"{JSON_RULES}\n\n"
        "IMPORTANT:\n"
        f"- Ensure all exercises are appropriate for {user.workout_location} workouts\n"
        f"- Respect dietary preferences: {user.dietary_preferences}\n"
        f"{medical_note}"
        "- Make the plan realistic and achievable"
    )


BODY_ANALYSIS_PROMPT = """
Analyze this person's body and estimate:
- gender (if clear)
- approximate fitness level (Beginner / Intermediate / Advanced)
- estimated body fat %
- approximate weight range
- posture quality (Good / Average / Poor)

Only respond in JSON format with these keys:
{
  "gender": "",
  "fitnessLevel": "",
  "bodyFat": "",
  "weightRange": "",
  "posture": ""
}
""".strip()


def describe_prompt(name: str, kind: ItemKind) -> str:
    if kind is ItemKind.MEAL:
        return (
            f'IMPORTANT: "{name}" is a FOOD/MEAL, NOT an exercise. Describe it as a nutritious meal dish.\n'
            "Include:\n"
            "- What ingredients and foods it contains\n"
            "- Its nutritional value (protein, carbs, fats, vitamins, minerals)\n"
            "- Why it's beneficial for fitness and health goals\n"
            "DO NOT describe it as a physical exercise or workout. "
            "Describe it as FOOD that you eat. Write 2 sentences."
        )
    return (
        f'Describe the exercise "{name}" in 2 sentences, focusing on proper form, '
        "technique, and fitness benefits."
    )


TONE_DESCRIPTIONS = {
    "motivational": "energetic, inspiring, and uplifting",
    "calm": "calm, reassuring, and peaceful",
}


def speech_prompt(name: str, goal: str, fitness_level: str, tone: str) -> str:
    return (
        f"You are a professional fitness coach creating a personalized {tone} speech for a client.\n\n"
        "USER INFORMATION:\n"
        f"- Name: {name}\n"
        f"- Fitness Goal: {goal}\n"
        f"- Fitness Level: {fitness_level}\n"
        f"- Desired Tone: {tone} ({TONE_DESCRIPTIONS[tone]})\n\n"
        "INSTRUCTIONS:\n"
        "Create a short, personalized motivational speech (2-3 sentences, maximum 150 words) that:\n"
        "1. Addresses the user by name\n"
        "2. Acknowledges their specific fitness goal\n"
        "3. Provides encouragement appropriate for their fitness level\n"
        f"4. Uses a {tone} tone throughout\n"
        "5. Is natural and conversational, suitable for text-to-speech\n\n"
        "OUTPUT FORMAT (respond ONLY with valid JSON, no markdown, no explanations):\n"
        '{\n  "speech": "..."\n}'
    )
