import uuid

import pytest

from marketplace.repositories.wishlist_repo import WishlistRepository
from marketplace.services.wishlist_service import WishlistService

pytestmark = pytest.mark.anyio


async def make_wishlist(store, notifier, identity):
    wishlist = WishlistService(WishlistRepository(store), notifier)
    wishlist.handle_identity_change(identity)
    await wishlist.wait_until_ready()
    return wishlist


async def test_toggle_scenario(store, notifier, alice, seller):
    p2 = store.seed_product(seller, name="Bookshelf")
    wishlist = await make_wishlist(store, notifier, alice)

    await wishlist.toggle(p2)
    assert [item.product_id for item in wishlist.items] == [p2]
    assert wishlist.items[0].product.name == "Bookshelf"

    await wishlist.toggle(p2)
    assert wishlist.items == []

    titles = [n.title for n in notifier.drain()]
    assert titles == ["Added to wishlist", "Removed from wishlist"]


@pytest.mark.parametrize("initially_present", [True, False])
async def test_toggle_twice_restores_membership(
    store, notifier, alice, seller, initially_present
):
    p = store.seed_product(seller)
    if initially_present:
        store.seed_wishlist_item(alice.id, p)
    wishlist = await make_wishlist(store, notifier, alice)

    await wishlist.toggle(p)
    assert wishlist.is_present(p) is not initially_present
    await wishlist.toggle(p)

    assert wishlist.is_present(p) is initially_present
    assert bool(store.rows("wishlist_items", user_id=alice.id)) is initially_present


async def test_count_is_number_of_entries(store, notifier, alice, seller):
    for _ in range(3):
        store.seed_wishlist_item(alice.id, store.seed_product(seller))
    wishlist = await make_wishlist(store, notifier, alice)

    assert wishlist.count() == 3
    assert wishlist.summary().count == 3


async def test_toggle_signed_out_prompts_login(store, notifier):
    wishlist = await make_wishlist(store, notifier, None)

    await wishlist.toggle(uuid.uuid4())

    assert store.count_calls("insert", "wishlist_items") == 0
    [notification] = notifier.drain()
    assert notification.title == "Please login"
    assert notification.description == "You need to be logged in to use wishlist"


async def test_toggle_failure_leaves_state_untouched(store, notifier, alice, seller):
    p = store.seed_product(seller)
    store.seed_wishlist_item(alice.id, p)
    wishlist = await make_wishlist(store, notifier, alice)
    store.fail_on.add(("delete", "wishlist_items"))

    await wishlist.toggle(p)

    assert wishlist.is_present(p)
    [notification] = notifier.drain()
    assert notification.description == "Failed to update wishlist"
    assert notification.variant == "destructive"


async def test_identity_switch_reloads_wishlist(store, notifier, alice, bob, seller):
    a_product, b_product = store.seed_product(seller), store.seed_product(seller)
    store.seed_wishlist_item(alice.id, a_product)
    store.seed_wishlist_item(bob.id, b_product)
    wishlist = await make_wishlist(store, notifier, alice)

    await wishlist.load(bob)

    assert [item.product_id for item in wishlist.items] == [b_product]
    assert wishlist.identity == bob
    assert not wishlist.is_present(a_product)


async def test_malformed_joined_product_degrades_to_empty_wishlist(
    store, notifier, alice, seller
):
    p = store.seed_product(seller)
    store.seed_wishlist_item(alice.id, p)
    store.rows("products", id=p)[0]["price"] = None

    wishlist = await make_wishlist(store, notifier, alice)

    assert wishlist.items == []
    assert wishlist.loading is False
    assert notifier.pending() == []
