"""
Meal vs. exercise detection for free-text item names.

The image and describe endpoints ask the same question with different
keyword lists; both go through classify_item(). Cached image URLs depend on
this heuristic, so bump CLASSIFIER_VERSION whenever it changes.
"""

import re
from enum import Enum

CLASSIFIER_VERSION = "v2"


class ItemKind(str, Enum):
    MEAL = "meal"
    EXERCISE = "exercise"


IMAGE_FOOD_KEYWORDS = (
    # Meals and dishes
    "burger", "sandwich", "salad", "soup", "pasta", "rice", "chicken", "fish",
    "beef", "pork", "lamb", "turkey", "seafood", "steak", "roast",
    # Meal times
    "breakfast", "lunch", "dinner", "snack", "meal", "food", "dish", "recipe",
    # Vegetables
    "vegetable", "veggie", "bean", "edamame", "potato", "fries", "sweet potato",
    "broccoli", "carrot", "spinach", "lettuce", "kale", "cabbage", "pepper",
    "onion", "garlic", "mushroom", "zucchini", "cucumber", "tomato", "corn",
    # Fruits
    "fruit", "apple", "banana", "orange", "berry", "strawberry", "blueberry",
    "grape", "mango", "pineapple", "watermelon", "avocado",
    # Grains and carbs
    "bread", "toast", "bagel", "quinoa", "oatmeal", "oats", "cereal", "granola",
    "noodle", "wheat", "barley", "buckwheat",
    # Proteins
    "egg", "cheese", "yogurt", "milk", "protein", "tofu", "tempeh", "lentil",
    "chickpea", "hummus", "nut", "almond", "walnut", "peanut", "cashew",
    "pistachio", "seed", "chia", "flax", "sunflower seed", "scramble",
    # Beverages
    "smoothie", "shake", "juice", "tea", "coffee", "water",
    # Other
    "sauce", "dressing", "mayo", "butter", "oil", "honey", "maple syrup",
    "chocolate", "cookie", "cake", "pie", "dessert", "ice cream",
)

# Shorter list used for descriptions; includes cooking methods as keywords
DESCRIBE_FOOD_KEYWORDS = (
    "burger", "sandwich", "salad", "soup", "pasta", "rice", "chicken", "fish",
    "beef", "pork", "vegetable", "fruit", "smoothie", "shake", "breakfast",
    "lunch", "dinner", "snack", "meal", "food", "dish", "recipe", "bean",
    "potato", "fries", "bread", "toast", "egg", "cheese", "yogurt", "oatmeal",
    "quinoa", "avocado", "tomato", "lettuce", "spinach", "broccoli", "carrot",
    "edamame", "nut", "grilled", "baked", "roasted", "steamed", "fried", "tofu",
    "scramble", "tempeh", "lentil", "chickpea", "hummus", "almond", "walnut",
    "peanut", "cashew", "pistachio", "seed", "chia", "flax",
)

FOOD_CONTAINERS = (
    "salad", "bowl", "plate", "wrap", "sandwich", "burger", "soup", "stew",
    "power bowl", "powerbowl",
)

COOKING_METHODS = (
    "grilled", "baked", "roasted", "steamed", "fried", "sautéed", "raw",
    "boiled", "poached", "braised", "stir-fried", "pan-seared",
)

_COOKING_METHOD_RE = re.compile(rf"^({'|'.join(map(re.escape, COOKING_METHODS))})\s")


def classify_item(name: str, keywords: tuple[str, ...] = IMAGE_FOOD_KEYWORDS) -> ItemKind:
    """
    A name is a meal when it contains a food keyword, starts with a cooking
    method, or names a food container ("bowl", "wrap", ...).
    Everything else is an exercise.
    """
    lower = name.strip().lower()
    if any(keyword in lower for keyword in keywords):
        return ItemKind.MEAL
    if _COOKING_METHOD_RE.match(lower):
        return ItemKind.MEAL
    if any(container in lower for container in FOOD_CONTAINERS):
        return ItemKind.MEAL
    return ItemKind.EXERCISE
