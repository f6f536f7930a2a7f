

# Category -> subcategories the topic generator samples from
CATEGORY_TREE = {
    "Technology": [
        "Artificial Intelligence",
        "Web Development",
        "Cybersecurity",
        "Cloud Computing",
        "Gadgets",
    ],
    "Health": ["Nutrition", "Fitness", "Mental Health", "Sleep"],
    "Finance": ["Personal Finance", "Investing", "Budgeting", "Cryptocurrency"],
    "Travel": ["Budget Travel", "Destinations", "Travel Tips"],
    "Lifestyle": ["Productivity", "Home", "Minimalism"],
    "Education": ["Online Learning", "Study Tips", "Career Development"],
    "Business": ["Entrepreneurship", "Marketing", "Remote Work"],
    "Food": ["Recipes", "Healthy Eating", "Cooking Tips"],
}

# Fallback subcategory when a category has no configured subcategories
DEFAULT_SUBCATEGORY = "General"
