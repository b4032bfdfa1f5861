"""
Tests for the recipe storage backends.

Every test in the Test* classes below runs against both the in-memory store
and the SQLAlchemy store (SQLite), since both must behave identically.
"""

import threading
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from cookbook.exceptions import InternalError, ValidationError
from cookbook.models import DEFAULT_AUTHOR_ID, RecipeCreate, RecipeUpdate
from cookbook.seed import SAMPLE_RECIPES
from cookbook.storage import MemoryRecipeStorage
from cookbook.storage.base import name_sort_key


def names(recipes):
    return [r.name for r in recipes]


class TestCreateAndGet:
    """Test cases for create, get_by_id and get_by_author."""

    def test_create_then_get_returns_input_plus_server_fields(self, storage, recipe_factory):
        """Test that a created recipe reads back as the input plus id, createdAt and zeroed rating."""
        payload = recipe_factory()
        created = storage.create(payload)
        fetched = storage.get_by_id(created.id)

        assert fetched == created
        assert isinstance(created.id, int)
        assert created.created_at.tzinfo is not None
        assert created.rating == 0
        assert created.rating_count == 0
        assert created.updated_at is None
        for field, value in payload.model_dump(exclude={"author_id"}).items():
            assert getattr(fetched, field) == value

    def test_ids_are_unique_and_increasing(self, storage, recipe_factory):
        """Test that ids are assigned in increasing order."""
        ids = [storage.create(recipe_factory(name=f"Recipe {i}")).id for i in range(5)]
        assert ids == sorted(ids)
        assert len(set(ids)) == 5

    def test_author_is_always_default(self, storage, recipe_factory):
        """Test that a client-supplied authorId is overwritten."""
        created = storage.create(recipe_factory(author_id=42))
        assert created.author_id == DEFAULT_AUTHOR_ID

    def test_get_unknown_id_returns_none(self, storage):
        """Test that an unknown id is reported as None, not an error."""
        assert storage.get_by_id(9999) is None

    def test_get_by_author_in_id_order(self, seeded_storage):
        """Test that get_by_author returns every recipe of the author, in id order."""
        recipes = seeded_storage.get_by_author(DEFAULT_AUTHOR_ID)
        assert len(recipes) == len(SAMPLE_RECIPES)
        assert [r.id for r in recipes] == sorted(r.id for r in recipes)
        assert seeded_storage.get_by_author(2) == []

    def test_create_rejects_empty_ingredients(self, storage, recipe_factory):
        """Test that storage re-checks ingredients even when pydantic was bypassed."""
        data = recipe_factory().model_dump()
        data["ingredients"] = []
        with pytest.raises(ValidationError) as exc_info:
            storage.create(RecipeCreate.model_construct(**data))
        assert exc_info.value.errors[0]["field"] == "ingredients"
        assert storage.count() == 0

    def test_non_ascii_text_round_trips(self, storage, recipe_factory):
        """Test that non-ASCII ingredients are stored unchanged."""
        created = storage.create(recipe_factory(name="Crème brûlée", ingredients=["½ cup crème fraîche"]))
        assert storage.get_by_id(created.id).ingredients == ["½ cup crème fraîche"]


class TestUpdateAndDelete:
    """Test cases for update and delete."""

    def test_empty_update_is_noop(self, storage, recipe_factory):
        """Test that update(id, {}) returns the record unchanged."""
        created = storage.create(recipe_factory())
        updated = storage.update(created.id, RecipeUpdate())
        assert updated.model_dump(exclude={"updated_at"}) == created.model_dump(exclude={"updated_at"})

    def test_partial_update_merges_fields(self, storage, recipe_factory):
        """Test that only the supplied fields change and updatedAt is set."""
        created = storage.create(recipe_factory())
        updated = storage.update(created.id, RecipeUpdate(name="Better Pancakes", servings=6))

        assert updated.name == "Better Pancakes"
        assert updated.servings == 6
        assert updated.description == created.description
        assert updated.ingredients == created.ingredients
        assert updated.id == created.id
        assert updated.created_at == created.created_at
        assert updated.updated_at is not None
        assert storage.get_by_id(created.id) == updated

    def test_update_can_clear_image(self, storage, recipe_factory):
        """Test that an explicit null clears the image URL."""
        created = storage.create(recipe_factory())
        updated = storage.update(created.id, RecipeUpdate(image_url=None))
        assert updated.image_url is None

    def test_update_unknown_id_returns_none(self, storage):
        """Test that updating an unknown id returns None."""
        assert storage.update(9999, RecipeUpdate(name="Nope")) is None

    def test_update_rejects_emptying_instructions(self, storage, recipe_factory):
        """Test that a constructed update with empty instructions is rejected."""
        created = storage.create(recipe_factory())
        with pytest.raises(ValidationError):
            storage.update(created.id, RecipeUpdate.model_construct(instructions=[]))
        assert storage.get_by_id(created.id).instructions == created.instructions

    def test_delete_then_get_is_not_found(self, storage, recipe_factory):
        """Test that deleting twice returns True then False."""
        created = storage.create(recipe_factory())
        assert storage.delete(created.id) is True
        assert storage.get_by_id(created.id) is None
        assert storage.delete(created.id) is False

    def test_ids_are_not_reused_after_delete(self, storage, recipe_factory):
        """Test that a new recipe never gets the id of a deleted one."""
        first = storage.create(recipe_factory(name="First"))
        second = storage.create(recipe_factory(name="Second"))
        storage.delete(second.id)
        third = storage.create(recipe_factory(name="Third"))
        assert third.id > second.id > first.id


class TestSorting:
    """Test cases for sort_by and get_many ordering."""

    def test_newest_is_reverse_creation_order(self, seeded_storage):
        """Test that newest returns the most recently created recipe first."""
        recipes = seeded_storage.sort_by("newest", 6, 0)
        assert names(recipes) == [r.name for r in reversed(SAMPLE_RECIPES)]
        assert [r.created_at for r in recipes] == sorted((r.created_at for r in recipes), reverse=True)

    def test_get_many_equals_newest(self, seeded_storage):
        """Test that get_many uses the newest ordering."""
        assert seeded_storage.get_many(6, 0) == seeded_storage.sort_by("newest", 6, 0)

    def test_oldest_is_creation_order(self, seeded_storage):
        """Test that oldest returns recipes in creation order."""
        assert names(seeded_storage.sort_by("oldest", 6, 0)) == [r.name for r in SAMPLE_RECIPES]

    def test_az_and_za_are_reversed(self, seeded_storage):
        """Test that az and za give exactly reversed orders for distinct names."""
        az = names(seeded_storage.sort_by("az", 6, 0))
        za = names(seeded_storage.sort_by("za", 6, 0))
        assert az == sorted(az, key=name_sort_key)
        assert za == list(reversed(az))

    def test_az_ignores_case(self, storage, recipe_factory):
        """Test that name ordering is case-insensitive."""
        for name in ["banana bread", "Apple pie", "cherry tart"]:
            storage.create(recipe_factory(name=name))
        assert names(storage.sort_by("az", 10, 0)) == ["Apple pie", "banana bread", "cherry tart"]

    def test_popular_ties_break_by_id(self, seeded_storage):
        """Test that equal ratings fall back to ascending id."""
        recipes = seeded_storage.sort_by("popular", 6, 0)
        assert [r.id for r in recipes] == sorted(r.id for r in recipes)

    def test_equal_timestamps_break_by_id(self, storage_factory, recipe_factory):
        """Test that recipes created at the same instant still order deterministically."""
        frozen = datetime(2024, 3, 1, tzinfo=timezone.utc)
        for kind in ("memory", "sqlite"):
            store = storage_factory(kind, lambda: frozen)
            ids = [store.create(recipe_factory(name=f"Same {i}")).id for i in range(4)]
            assert [r.id for r in store.sort_by("newest", 10, 0)] == list(reversed(ids))
            assert [r.id for r in store.sort_by("oldest", 10, 0)] == ids

    def test_unknown_criterion_raises(self, seeded_storage):
        """Test that an unknown sort criterion is a ValidationError."""
        with pytest.raises(ValidationError) as exc_info:
            seeded_storage.sort_by("rating", 6, 0)
        assert exc_info.value.errors[0]["field"] == "sort"

    def test_negative_page_raises(self, seeded_storage):
        """Test that negative limit or offset is rejected."""
        with pytest.raises(ValidationError):
            seeded_storage.sort_by("newest", -1, 0)
        with pytest.raises(ValidationError):
            seeded_storage.get_many(6, -1)


class TestPagination:
    """Test cases for limit/offset slicing."""

    @pytest.mark.parametrize("criterion", ["newest", "oldest", "az", "za", "popular"])
    def test_pages_concatenate_to_one_long_page(self, storage, recipe_factory, criterion):
        """Test that pages at offsets 0, 6, 12 equal one call with limit 18."""
        for i in range(20):
            storage.create(recipe_factory(name=f"Recipe {i % 7} {i}"))

        pages = []
        for offset in (0, 6, 12):
            pages.extend(storage.sort_by(criterion, 6, offset))
        assert [r.id for r in pages] == [r.id for r in storage.sort_by(criterion, 18, 0)]

    def test_search_and_tag_pages_concatenate(self, storage, recipe_factory):
        """Test that search and tag filter paginate the same way."""
        for i in range(14):
            storage.create(recipe_factory(name=f"Soup {i}", tags=["Dinner", "Healthy"]))

        search_pages = storage.search("soup", 6, 0) + storage.search("soup", 6, 6) + storage.search("soup", 6, 12)
        assert [r.id for r in search_pages] == [r.id for r in storage.search("soup", 18, 0)]

        tag_pages = (storage.filter_by_tags(["Dinner"], 6, 0) + storage.filter_by_tags(["Dinner"], 6, 6)
                     + storage.filter_by_tags(["Dinner"], 6, 12))
        assert [r.id for r in tag_pages] == [r.id for r in storage.filter_by_tags(["Dinner"], 18, 0)]

    def test_offset_past_end_is_empty(self, seeded_storage):
        """Test that an offset beyond the data returns an empty page."""
        assert seeded_storage.get_many(6, 6) == []
        assert seeded_storage.sort_by("az", 6, 100) == []

    def test_zero_limit_is_empty(self, seeded_storage):
        """Test that limit 0 returns nothing."""
        assert seeded_storage.get_many(0, 0) == []


class TestSearch:
    """Test cases for free-text search."""

    def test_search_matches_name_case_insensitively(self, seeded_storage):
        """Test that search ignores case."""
        assert names(seeded_storage.search("PASTA", 6, 0)) == ["Homemade Pasta with Fresh Herbs"]

    def test_search_matches_ingredient(self, seeded_storage):
        """Test that search looks into ingredients."""
        assert names(seeded_storage.search("feta", 6, 0)) == ["Grilled Chicken Salad"]

    def test_search_matches_tag(self, seeded_storage):
        """Test that search looks into tags."""
        assert names(seeded_storage.search("high-protein", 6, 0)) == ["Grilled Chicken Salad"]

    def test_search_matches_description(self, seeded_storage):
        """Test that search looks into descriptions."""
        assert names(seeded_storage.search("better than delivery", 6, 0)) == ["Homemade Margherita Pizza"]

    def test_search_results_are_newest_first(self, seeded_storage):
        """Test that multiple matches come back newest first."""
        results = seeded_storage.search("homemade", 6, 0)
        assert names(results) == ["Grilled Chicken Salad", "Homemade Margherita Pizza",
                                  "Homemade Pasta with Fresh Herbs"]

    def test_blank_search_behaves_like_get_many(self, seeded_storage):
        """Test that a blank query returns the default listing."""
        assert seeded_storage.search("   ", 6, 0) == seeded_storage.get_many(6, 0)

    def test_search_treats_wildcards_literally(self, seeded_storage):
        """Test that SQL wildcard characters are not interpreted."""
        assert seeded_storage.search("%", 6, 0) == []
        assert seeded_storage.search("_", 6, 0) == []

    def test_search_no_match(self, seeded_storage):
        """Test that a query matching nothing returns an empty list."""
        assert seeded_storage.search("sushi", 6, 0) == []

    def test_search_matches_list_elements_one_by_one(self, storage, recipe_factory):
        """Test that list separators never match and quotes inside an ingredient do."""
        storage.create(recipe_factory(name="Plain", ingredients=["flour", "water"], tags=["Baking"]))
        storage.create(recipe_factory(name="Tart", ingredients=["1 9\" pan", "butter"], tags=["Dessert"]))

        assert storage.search("\", \"", 6, 0) == []
        assert storage.search("[", 6, 0) == []
        assert names(storage.search("9\" pan", 6, 0)) == ["Tart"]
        assert storage.search("flour\nwater", 6, 0) == []
        assert storage.search("bakingdessert", 6, 0) == []


class TestFilterByTags:
    """Test cases for tag filtering (AND semantics)."""

    def test_single_tag(self, seeded_storage):
        """Test that filtering by Vegan returns only Vegan recipes."""
        results = seeded_storage.filter_by_tags(["Vegan"], 6, 0)
        assert names(results) == ["Berry Smoothie Bowl"]
        assert all("Vegan" in r.tags for r in results)

    def test_all_tags_must_match(self, seeded_storage, recipe_factory):
        """Test that every requested tag must be present."""
        assert seeded_storage.filter_by_tags(["Vegan", "Dessert"], 6, 0) == []

        both = seeded_storage.create(recipe_factory(name="Vegan Brownies", tags=["Vegan", "Dessert"]))
        results = seeded_storage.filter_by_tags(["Vegan", "Dessert"], 6, 0)
        assert [r.id for r in results] == [both.id]

    def test_tag_match_is_exact(self, seeded_storage):
        """Test that tags match exactly and case-sensitively."""
        assert seeded_storage.filter_by_tags(["vegan"], 6, 0) == []
        assert seeded_storage.filter_by_tags(["Veg"], 6, 0) == []

    def test_multiple_matches_newest_first(self, seeded_storage):
        """Test that tag results are ordered newest first."""
        assert names(seeded_storage.filter_by_tags(["Vegetarian"], 6, 0)) == [
            "Homemade Margherita Pizza",
            "Avocado Toast with Poached Egg",
            "Homemade Pasta with Fresh Herbs",
        ]

    def test_empty_tag_list_behaves_like_get_many(self, seeded_storage):
        """Test that no tags means the default listing."""
        assert seeded_storage.filter_by_tags([], 6, 0) == seeded_storage.get_many(6, 0)

    def test_tag_with_quotes_matches_whole_tag(self, storage, recipe_factory):
        """Test that a tag containing quotes matches only as a whole tag."""
        special = storage.create(recipe_factory(name="Special", tags=["Chef's \"Pick\"", "Dinner"]))
        storage.create(recipe_factory(name="Other", tags=["Dinner"]))

        assert [r.id for r in storage.filter_by_tags(["Chef's \"Pick\""], 6, 0)] == [special.id]
        assert storage.filter_by_tags(["\"Pick\""], 6, 0) == []


class TestSeed:
    """Test cases for seeding."""

    def test_seed_only_fills_empty_store(self, storage):
        """Test that seeding inserts the samples once."""
        assert storage.seed(SAMPLE_RECIPES) == len(SAMPLE_RECIPES)
        assert storage.seed(SAMPLE_RECIPES) == 0
        assert storage.count() == len(SAMPLE_RECIPES)


class TestMemoryIsolation:
    """Test cases specific to the in-memory store."""

    def test_returned_records_are_copies(self, recipe_factory):
        """Test that mutating a returned recipe does not change the store."""
        store = MemoryRecipeStorage()
        created = store.create(recipe_factory())
        created.ingredients.append("sneaky extra")
        store.get_by_id(created.id).tags.append("Dessert")

        fetched = store.get_by_id(created.id)
        assert "sneaky extra" not in fetched.ingredients
        assert "Dessert" not in fetched.tags

    def test_accents_sort_with_plain_letters(self, recipe_factory):
        """Test that accented names sort next to their unaccented neighbours."""
        store = MemoryRecipeStorage()
        for name in ["Flan", "Éclair", "Donut"]:
            store.create(recipe_factory(name=name))
        assert names(store.sort_by("az", 10, 0)) == ["Donut", "Éclair", "Flan"]


class TestMemoryConcurrency:
    """Test cases for concurrent writers on the in-memory store."""

    THREADS = 8
    PER_THREAD = 50

    def run_in_threads(self, target):
        """Start THREADS workers together and fail on any exception they raised."""
        barrier = threading.Barrier(self.THREADS)
        errors = []

        def worker(index):
            barrier.wait()
            try:
                target(index)
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(self.THREADS)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert errors == []

    def test_concurrent_creates_get_unique_ids(self, recipe_factory):
        """Test that parallel creates never share or skip an id."""
        store = MemoryRecipeStorage()
        created = [[] for _ in range(self.THREADS)]

        def create_many(index):
            for n in range(self.PER_THREAD):
                created[index].append(store.create(recipe_factory(name=f"Recipe {index}-{n}")).id)

        self.run_in_threads(create_many)

        total = self.THREADS * self.PER_THREAD
        ids = [recipe_id for chunk in created for recipe_id in chunk]
        assert len(set(ids)) == total
        assert sorted(ids) == list(range(1, total + 1))
        assert store.count() == total

    def test_interleaved_updates_deletes_and_creates(self, recipe_factory):
        """Test that mixed parallel writes leave a consistent store."""
        store = MemoryRecipeStorage()
        total = self.THREADS * self.PER_THREAD
        ids = [store.create(recipe_factory(name=f"Recipe {n}")).id for n in range(total)]

        def mutate(index):
            for n, recipe_id in enumerate(ids[index::self.THREADS]):
                if n % 2:
                    assert store.delete(recipe_id) is True
                else:
                    assert store.update(recipe_id, RecipeUpdate(servings=index + 2)) is not None
                store.sort_by("az", 6, 0)
                store.create(recipe_factory(name=f"Extra {index}-{n}"))

        self.run_in_threads(mutate)

        deleted = total // 2
        assert store.count() == total - deleted + total
        listed = store.sort_by("newest", 2 * total, 0)
        assert len({r.id for r in listed}) == store.count()
        for index in range(self.THREADS):
            mine = ids[index::self.THREADS]
            assert all(store.get_by_id(i).servings == index + 2 for i in mine[0::2])
            assert all(store.get_by_id(i) is None for i in mine[1::2])


class TestSqlFailures:
    """Test cases for database failures in the SQL store."""

    def test_database_error_becomes_internal_error(self, storage_factory, clock):
        """Test that SQLAlchemy errors are wrapped in InternalError without details."""
        from cookbook.db import RecipeRow

        store = storage_factory("sqlite", clock)
        RecipeRow.__table__.drop(store._engine)

        with pytest.raises(InternalError) as exc_info:
            store.count()
        assert exc_info.value.message == "Database operation failed"


class TestRecipeModels:
    """Test cases for request model validation."""

    def test_create_strips_blank_lines_and_dedupes_tags(self, recipe_factory):
        """Test that blank entries are dropped and duplicate tags removed."""
        recipe = recipe_factory(ingredients=[" flour ", "", "  "], tags=["Vegan", " Vegan", "Dessert"])
        assert recipe.ingredients == ["flour"]
        assert recipe.tags == ["Vegan", "Dessert"]

    def test_create_rejects_only_blank_ingredients(self, recipe_factory):
        """Test that ingredients with only blank entries are invalid."""
        with pytest.raises(PydanticValidationError):
            recipe_factory(ingredients=["   "])

    def test_create_accepts_camel_case(self):
        """Test that JSON (camelCase) field names are accepted."""
        recipe = RecipeCreate.model_validate({
            "name": "Tea", "description": "A cup of tea.", "ingredients": ["tea"],
            "instructions": ["Steep"], "prepTime": 1, "cookTime": 3, "servings": 1,
            "imageUrl": "", "id": 5, "rating": 99,
        })
        assert recipe.prep_time == 1
        assert recipe.image_url is None

    def test_update_rejects_null_for_required_field(self):
        """Test that an explicit null is only allowed for imageUrl."""
        with pytest.raises(PydanticValidationError):
            RecipeUpdate.model_validate({"name": None})
        assert RecipeUpdate.model_validate({"imageUrl": None}).changes() == {"image_url": None}

    def test_update_changes_only_sent_fields(self):
        """Test that changes() contains only the fields that were sent."""
        assert RecipeUpdate.model_validate({"prepTime": 5}).changes() == {"prep_time": 5}
        assert RecipeUpdate().changes() == {}
