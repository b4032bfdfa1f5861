"""
Sample recipes loaded into an empty store at startup (SEED_RECIPES=true).

Cook times and servings are filled in for every sample so the records pass
the same validation as user-created recipes.
"""

from typing import List

from cookbook.models import RecipeCreate

_IMAGE_BASE = "https://images.unsplash.com/{photo}?ixlib=rb-4.0.3&auto=format&fit=crop&w=800&h=450"


def _image(photo: str) -> str:
    return _IMAGE_BASE.format(photo=photo)


SAMPLE_RECIPES: List[RecipeCreate] = [
    RecipeCreate(
        name="Homemade Pasta with Fresh Herbs",
        description=(
            "A simple yet delicious pasta dish made with fresh basil, garlic, and high-quality "
            "olive oil. Perfect for a quick weeknight dinner."
        ),
        ingredients=[
            "2 cups all-purpose flour",
            "3 large eggs",
            "1 tablespoon olive oil",
            "½ teaspoon salt",
            "¼ cup fresh basil, chopped",
            "2 cloves garlic, minced",
        ],
        instructions=[
            "Mix flour and salt in a large bowl.",
            "Make a well in the center and add eggs and olive oil.",
            "Gradually mix the flour into the wet ingredients.",
            "Knead the dough for 8-10 minutes until smooth.",
            "Let rest for 30 minutes covered with a towel.",
            "Roll out and cut into desired pasta shapes.",
            "Cook in boiling water for 2-3 minutes.",
            "Toss with olive oil, garlic, and fresh herbs.",
        ],
        image_url=_image("photo-1546549032-9571cd6b27df"),
        prep_time=25,
        cook_time=5,
        servings=4,
        tags=["Italian", "Dinner", "Vegetarian"],
    ),
    RecipeCreate(
        name="Avocado Toast with Poached Egg",
        description=(
            "Creamy avocado on toasted sourdough bread topped with a perfectly poached egg. "
            "A nutritious breakfast ready in minutes."
        ),
        ingredients=[
            "1 ripe avocado",
            "2 slices sourdough bread",
            "2 eggs",
            "1 tablespoon white vinegar",
            "Salt and pepper to taste",
            "Red pepper flakes (optional)",
            "Fresh herbs for garnish",
        ],
        instructions=[
            "Toast the sourdough bread until golden and crispy.",
            "Mash the avocado in a bowl and season with salt and pepper.",
            "Bring a pot of water to a simmer, add vinegar.",
            "Crack egg into a small bowl, then slide into the simmering water.",
            "Poach for 3-4 minutes, then remove with a slotted spoon.",
            "Spread mashed avocado on toast and top with poached egg.",
            "Season with salt, pepper, and red pepper flakes if desired.",
            "Garnish with fresh herbs before serving.",
        ],
        image_url=_image("photo-1525351484163-7529414344d8"),
        prep_time=15,
        cook_time=5,
        servings=2,
        tags=["Breakfast", "Quick & Easy", "Vegetarian"],
    ),
    RecipeCreate(
        name="Berry Smoothie Bowl",
        description=(
            "A refreshing and nutritious smoothie bowl packed with antioxidants and topped "
            "with fresh fruits, granola, and honey."
        ),
        ingredients=[
            "1 cup mixed frozen berries",
            "1 frozen banana",
            "½ cup Greek yogurt",
            "¼ cup almond milk",
            "1 tablespoon honey or maple syrup",
            "Toppings: fresh berries, granola, chia seeds, sliced banana",
        ],
        instructions=[
            "Add frozen berries, banana, yogurt, milk, and sweetener to a blender.",
            "Blend until smooth, adding more milk if needed.",
            "Pour into a bowl.",
            "Top with fresh berries, granola, chia seeds, and sliced banana.",
            "Drizzle with additional honey if desired.",
            "Serve immediately.",
        ],
        image_url=_image("photo-1511690656952-34342bb7c2f2"),
        prep_time=10,
        cook_time=1,
        servings=1,
        tags=["Breakfast", "Vegan", "Healthy"],
    ),
    RecipeCreate(
        name="Homemade Margherita Pizza",
        description=(
            "Classic Margherita pizza with a crispy crust, San Marzano tomatoes, fresh "
            "mozzarella, and basil. Better than delivery!"
        ),
        ingredients=[
            "For the dough: 2½ cups flour, 1 tsp yeast, 1 tsp salt, 1 tbsp olive oil, 1 cup warm water",
            "½ cup San Marzano tomato sauce",
            "8 oz fresh mozzarella, sliced",
            "Fresh basil leaves",
            "2 tbsp extra virgin olive oil",
            "Salt and pepper to taste",
        ],
        instructions=[
            "Mix flour, yeast, and salt in a bowl.",
            "Add olive oil and warm water, mix until combined.",
            "Knead for 5-7 minutes until smooth and elastic.",
            "Let rise in an oiled bowl for 1-2 hours.",
            "Preheat oven to 500°F with a pizza stone if available.",
            "Stretch dough into a 12-inch circle.",
            "Top with tomato sauce, mozzarella, and a drizzle of olive oil.",
            "Bake for 10-12 minutes until crust is golden.",
            "Add fresh basil leaves after baking.",
            "Season with salt and pepper before serving.",
        ],
        image_url=_image("photo-1513104890138-7c749659a591"),
        prep_time=40,
        cook_time=12,
        servings=4,
        tags=["Italian", "Dinner", "Vegetarian"],
    ),
    RecipeCreate(
        name="Chocolate Chip Cookies",
        description=(
            "Classic chocolate chip cookies with crispy edges and a soft, chewy center. "
            "The perfect balance of sweet and salty."
        ),
        ingredients=[
            "1 cup unsalted butter, softened",
            "¾ cup granulated sugar",
            "¾ cup brown sugar, packed",
            "2 large eggs",
            "2 tsp vanilla extract",
            "2¼ cups all-purpose flour",
            "1 tsp baking soda",
            "½ tsp salt",
            "2 cups chocolate chips",
        ],
        instructions=[
            "Preheat oven to 375°F and line baking sheets with parchment paper.",
            "Cream together butter and both sugars until light and fluffy.",
            "Beat in eggs one at a time, then add vanilla.",
            "In a separate bowl, mix flour, baking soda, and salt.",
            "Gradually add dry ingredients to wet ingredients and mix until just combined.",
            "Fold in chocolate chips.",
            "Drop tablespoon-sized dough balls onto baking sheets, 2 inches apart.",
            "Bake for 9-11 minutes until edges are golden but centers are still soft.",
            "Cool on baking sheet for 5 minutes, then transfer to wire rack.",
        ],
        image_url=_image("photo-1499636136210-6f4ee915583e"),
        prep_time=35,
        cook_time=11,
        servings=24,
        tags=["Dessert", "Baking", "Kid-Friendly"],
    ),
    RecipeCreate(
        name="Grilled Chicken Salad",
        description=(
            "A healthy and filling salad with grilled chicken, mixed greens, avocado, and "
            "homemade vinaigrette dressing."
        ),
        ingredients=[
            "2 boneless, skinless chicken breasts",
            "6 cups mixed salad greens",
            "1 avocado, sliced",
            "1 cup cherry tomatoes, halved",
            "¼ cup red onion, thinly sliced",
            "¼ cup crumbled feta cheese",
            "For the dressing: 3 tbsp olive oil, 1 tbsp lemon juice, 1 tsp Dijon mustard, salt and pepper",
        ],
        instructions=[
            "Season chicken breasts with salt, pepper, and olive oil.",
            "Grill chicken for 6-7 minutes per side until fully cooked.",
            "Let chicken rest for 5 minutes, then slice.",
            "In a large bowl, combine mixed greens, tomatoes, and red onion.",
            "Whisk together olive oil, lemon juice, mustard, salt, and pepper.",
            "Toss salad with dressing.",
            "Top with sliced chicken, avocado, and feta cheese.",
            "Serve immediately.",
        ],
        image_url=_image("photo-1512621776951-a57141f2eefd"),
        prep_time=20,
        cook_time=14,
        servings=2,
        tags=["Lunch", "Healthy", "High-Protein"],
    ),
]
