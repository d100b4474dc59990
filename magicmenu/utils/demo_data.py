"""
Seed content — single source of truth for every demo/sample record.
The Mutation Mirror, the admin demo-data endpoint and the tool server all
import exclusively from here. Timestamps are added by the callers.
"""

# Collection name → storage key in the Local Record Store
COLLECTION_KEYS: dict[str, str] = {
    "restaurants": "demo_restaurants",
    "categories": "demo_categories",
    "menu_items": "demo_menu_items",
    "reviews": "demo_reviews",
    "users": "demo_users",
}

PLACEHOLDER_IMAGE = "/placeholder-dish.jpg"

# ── Seeded for every newly registered restaurant ─────────────────────────────

# (name, sort_order)
DEFAULT_CATEGORIES: list[tuple[str, int]] = [
    ("Appetizers", 1),
    ("Main Courses", 2),
    ("Desserts", 3),
]

# "category" is the 1-based index into DEFAULT_CATEGORIES
DEFAULT_DISHES: list[dict] = [
    {
        "category": 1,
        "name": "Caesar Salad",
        "description": "Fresh romaine lettuce with parmesan cheese and croutons",
        "price_cents": 1200,
        "ingredients": "Romaine lettuce, Parmesan cheese, Croutons, Caesar dressing, Lemon juice",
        "allergens": "Dairy, Gluten, Eggs",
        "nutrition_info": {"calories": "320", "protein": "12g", "carbs": "18g", "fat": "22g", "fiber": "4g"},
    },
    {
        "category": 1,
        "name": "Buffalo Wings",
        "description": "Spicy chicken wings with blue cheese dip",
        "price_cents": 1500,
        "ingredients": "Chicken wings, Buffalo sauce, Blue cheese, Celery, Ranch dressing",
        "allergens": "Dairy, Gluten",
        "nutrition_info": {"calories": "450", "protein": "28g", "carbs": "8g", "fat": "32g", "fiber": "2g"},
    },
    {
        "category": 2,
        "name": "Grilled Salmon",
        "description": "Fresh Atlantic salmon with lemon herb butter",
        "price_cents": 2800,
        "ingredients": "Atlantic salmon, Lemon, Herbs, Butter, Olive oil, Salt, Pepper",
        "allergens": "Fish, Dairy",
        "nutrition_info": {"calories": "380", "protein": "35g", "carbs": "2g", "fat": "24g", "fiber": "0g"},
    },
    {
        "category": 2,
        "name": "Beef Steak",
        "description": "Premium ribeye steak cooked to perfection",
        "price_cents": 3500,
        "ingredients": "Ribeye steak, Salt, Black pepper, Garlic, Rosemary, Olive oil",
        "allergens": "None",
        "nutrition_info": {"calories": "520", "protein": "42g", "carbs": "0g", "fat": "38g", "fiber": "0g"},
    },
    {
        "category": 3,
        "name": "Chocolate Cake",
        "description": "Rich chocolate cake with vanilla ice cream",
        "price_cents": 800,
        "ingredients": "Chocolate, Flour, Sugar, Eggs, Butter, Vanilla ice cream, Cocoa powder",
        "allergens": "Dairy, Eggs, Gluten",
        "nutrition_info": {"calories": "420", "protein": "6g", "carbs": "52g", "fat": "22g", "fiber": "3g"},
    },
]

# (rating, comment template, days ago); {name} is the restaurant name
DEFAULT_REVIEWS: list[tuple[int, str, int]] = [
    (5, "Amazing food at {name}! The service was excellent and the atmosphere was perfect. Highly recommend!", 7),
    (4, "Great experience at {name}. The food was delicious and the staff was very friendly. Will definitely come back!", 5),
    (3, "Decent food at {name}. The service was okay but could be improved. The ambiance was nice though.", 3),
]

# Used when fewer than three users exist
FALLBACK_REVIEWER_IDS = ["demo-user-1", "demo-user-2", "demo-user-3"]

# ── Demo accounts ────────────────────────────────────────────────────────────

# "seen_hours_ago" None means never signed in
DEMO_USERS: list[dict] = [
    {"id": "demo-user-1", "email": "john.doe@example.com", "first_name": "John",
     "last_name": "Doe", "user_type": "customer", "created_days_ago": 0, "seen_hours_ago": 24},
    {"id": "demo-user-2", "email": "jane.smith@example.com", "first_name": "Jane",
     "last_name": "Smith", "user_type": "owner", "created_days_ago": 2, "seen_hours_ago": 1},
    {"id": "demo-user-3", "email": "mike.wilson@example.com", "first_name": "Mike",
     "last_name": "Wilson", "user_type": "customer", "created_days_ago": 3, "seen_hours_ago": None},
]

# ── Demo menus written to the Local Record Store ─────────────────────────────

DEMO_RESTAURANTS: list[dict] = [
    {
        "id": "demo-restaurant-1",
        "name": "Tokyo Sushi Bar",
        "slug": "tokyo-sushi-bar",
        "description": "Authentic Japanese cuisine with fresh sushi and sashimi",
        "phone": "+1 (555) 123-4567",
        "address": "123 Main Street, Tokyo, JP",
        "owner_user_id": "demo-user-1",
        "avg_rating": 4.5,
        "review_count": 2,
        "logo_url": PLACEHOLDER_IMAGE,
    },
    {
        "id": "demo-restaurant-2",
        "name": "Bella Italia",
        "slug": "bella-italia",
        "description": "Traditional Italian dishes with homemade pasta",
        "phone": "+1 (555) 234-5678",
        "address": "456 Oak Avenue, Rome, IT",
        "owner_user_id": "demo-user-2",
        "avg_rating": 4.2,
        "review_count": 5,
        "logo_url": PLACEHOLDER_IMAGE,
    },
]

DEMO_CATEGORIES: list[dict] = [
    {"id": "cat-demo-restaurant-1-1", "restaurant_id": "demo-restaurant-1", "name": "Sushi Rolls", "sort_order": 1},
    {"id": "cat-demo-restaurant-1-2", "restaurant_id": "demo-restaurant-1", "name": "Sashimi", "sort_order": 2},
    {"id": "cat-demo-restaurant-1-3", "restaurant_id": "demo-restaurant-1", "name": "Hot Dishes", "sort_order": 3},
    {"id": "cat-demo-restaurant-2-1", "restaurant_id": "demo-restaurant-2", "name": "Appetizers", "sort_order": 1},
    {"id": "cat-demo-restaurant-2-2", "restaurant_id": "demo-restaurant-2", "name": "Pasta", "sort_order": 2},
    {"id": "cat-demo-restaurant-2-3", "restaurant_id": "demo-restaurant-2", "name": "Desserts", "sort_order": 3},
]

DEMO_MENU_ITEMS: list[dict] = [
    {
        "id": "item-demo-restaurant-1-1",
        "restaurant_id": "demo-restaurant-1",
        "category_id": "cat-demo-restaurant-1-1",
        "name": "California Roll",
        "description": "Crab, avocado, and cucumber",
        "price_cents": 1400,
        "ingredients": "Crab meat, Avocado, Cucumber, Sushi rice, Nori seaweed, Sesame seeds",
        "allergens": "Shellfish, Sesame",
        "nutrition_info": {"calories": "280", "protein": "8g", "carbs": "35g", "fat": "12g", "fiber": "3g"},
    },
    {
        "id": "item-demo-restaurant-1-2",
        "restaurant_id": "demo-restaurant-1",
        "category_id": "cat-demo-restaurant-1-1",
        "name": "Spicy Tuna Roll",
        "description": "Fresh tuna with spicy mayo",
        "price_cents": 1600,
        "ingredients": "Fresh tuna, Spicy mayo, Sushi rice, Nori seaweed, Scallions",
        "allergens": "Fish, Eggs",
        "nutrition_info": {"calories": "320", "protein": "15g", "carbs": "38g", "fat": "14g", "fiber": "2g"},
    },
    {
        "id": "item-demo-restaurant-1-3",
        "restaurant_id": "demo-restaurant-1",
        "category_id": "cat-demo-restaurant-1-2",
        "name": "Salmon Sashimi",
        "description": "Fresh Atlantic salmon sashimi",
        "price_cents": 1800,
        "ingredients": "Fresh Atlantic salmon, Wasabi, Pickled ginger, Soy sauce",
        "allergens": "Fish",
        "nutrition_info": {"calories": "180", "protein": "22g", "carbs": "2g", "fat": "8g", "fiber": "0g"},
    },
    {
        "id": "item-demo-restaurant-2-1",
        "restaurant_id": "demo-restaurant-2",
        "category_id": "cat-demo-restaurant-2-1",
        "name": "Bruschetta",
        "description": "Toasted bread with tomatoes and basil",
        "price_cents": 1200,
        "ingredients": "Italian bread, Fresh tomatoes, Basil, Garlic, Olive oil, Balsamic vinegar",
        "allergens": "Gluten",
        "nutrition_info": {"calories": "220", "protein": "6g", "carbs": "28g", "fat": "10g", "fiber": "2g"},
    },
    {
        "id": "item-demo-restaurant-2-2",
        "restaurant_id": "demo-restaurant-2",
        "category_id": "cat-demo-restaurant-2-2",
        "name": "Spaghetti Carbonara",
        "description": "Classic Roman pasta with eggs and pancetta",
        "price_cents": 2200,
        "ingredients": "Spaghetti pasta, Eggs, Pancetta, Parmesan cheese, Black pepper, Olive oil",
        "allergens": "Gluten, Dairy, Eggs",
        "nutrition_info": {"calories": "480", "protein": "18g", "carbs": "45g", "fat": "24g", "fiber": "2g"},
    },
]

# ── Sample dataset inserted into the hosted backend by the tool server ───────

SAMPLE_RESTAURANTS: list[dict] = [
    {
        "id": "11111111-1111-1111-1111-111111111111",
        "slug": "bella-italia",
        "name": "Bella Italia",
        "description": "Authentic Italian cuisine with fresh ingredients and traditional recipes",
        "phone": "+1-555-0123",
        "address": "123 Main Street, Downtown",
    },
    {
        "id": "22222222-2222-2222-2222-222222222222",
        "slug": "tokyo-sushi",
        "name": "Tokyo Sushi Bar",
        "description": "Fresh sushi and Japanese dishes made by master chefs",
        "phone": "+1-555-0456",
        "address": "456 Oak Avenue, Midtown",
    },
    {
        "id": "33333333-3333-3333-3333-333333333333",
        "slug": "burger-palace",
        "name": "The Burger Palace",
        "description": "Gourmet burgers and American classics in a cozy atmosphere",
        "phone": "+1-555-0789",
        "address": "789 Pine Road, Uptown",
    },
]

_R1, _R2, _R3 = (r["id"] for r in SAMPLE_RESTAURANTS)

SAMPLE_CATEGORIES: list[dict] = [
    {"id": "aaaa1111-1111-1111-1111-111111111111", "restaurant_id": _R1, "name": "Appetizers", "sort_order": 1},
    {"id": "aaaa2222-2222-2222-2222-222222222222", "restaurant_id": _R1, "name": "Pasta", "sort_order": 2},
    {"id": "aaaa3333-3333-3333-3333-333333333333", "restaurant_id": _R1, "name": "Pizza", "sort_order": 3},
    {"id": "bbbb1111-1111-1111-1111-111111111111", "restaurant_id": _R2, "name": "Sushi Rolls", "sort_order": 1},
    {"id": "bbbb2222-2222-2222-2222-222222222222", "restaurant_id": _R2, "name": "Sashimi", "sort_order": 2},
    {"id": "bbbb3333-3333-3333-3333-333333333333", "restaurant_id": _R2, "name": "Hot Dishes", "sort_order": 3},
    {"id": "cccc1111-1111-1111-1111-111111111111", "restaurant_id": _R3, "name": "Burgers", "sort_order": 1},
    {"id": "cccc2222-2222-2222-2222-222222222222", "restaurant_id": _R3, "name": "Sides", "sort_order": 2},
    {"id": "cccc3333-3333-3333-3333-333333333333", "restaurant_id": _R3, "name": "Beverages", "sort_order": 3},
]

SAMPLE_MENU_ITEMS: list[dict] = [
    {"id": "item1111-1111-1111-1111-111111111111", "restaurant_id": _R1, "category_id": "aaaa1111-1111-1111-1111-111111111111",
     "name": "Bruschetta", "description": "Toasted bread with fresh tomatoes, basil, and garlic", "price_cents": 1200},
    {"id": "item1121-1111-1111-1111-111111111111", "restaurant_id": _R1, "category_id": "aaaa2222-2222-2222-2222-222222222222",
     "name": "Spaghetti Carbonara", "description": "Classic pasta with eggs, pancetta, and parmesan", "price_cents": 2200},
    {"id": "item1131-1111-1111-1111-111111111111", "restaurant_id": _R1, "category_id": "aaaa3333-3333-3333-3333-333333333333",
     "name": "Margherita Pizza", "description": "Traditional pizza with tomato, mozzarella, and basil", "price_cents": 1800},
    {"id": "item2111-2222-2222-2222-222222222222", "restaurant_id": _R2, "category_id": "bbbb1111-1111-1111-1111-111111111111",
     "name": "California Roll", "description": "Crab, avocado, and cucumber with sesame seeds", "price_cents": 1400},
    {"id": "item2121-2222-2222-2222-222222222222", "restaurant_id": _R2, "category_id": "bbbb2222-2222-2222-2222-222222222222",
     "name": "Salmon Sashimi", "description": "Fresh Atlantic salmon, 6 pieces", "price_cents": 1800},
    {"id": "item2131-2222-2222-2222-222222222222", "restaurant_id": _R2, "category_id": "bbbb3333-3333-3333-3333-333333333333",
     "name": "Chicken Teriyaki", "description": "Grilled chicken with teriyaki sauce and rice", "price_cents": 1900},
    {"id": "item3111-3333-3333-3333-333333333333", "restaurant_id": _R3, "category_id": "cccc1111-1111-1111-1111-111111111111",
     "name": "Classic Cheeseburger", "description": "Beef patty with cheese, lettuce, tomato, and pickles", "price_cents": 1500},
    {"id": "item3121-3333-3333-3333-333333333333", "restaurant_id": _R3, "category_id": "cccc2222-2222-2222-2222-222222222222",
     "name": "French Fries", "description": "Crispy golden fries with sea salt", "price_cents": 800},
    {"id": "item3131-3333-3333-3333-333333333333", "restaurant_id": _R3, "category_id": "cccc3333-3333-3333-3333-333333333333",
     "name": "Coca Cola", "description": "Classic Coca Cola, ice cold", "price_cents": 300},
]
