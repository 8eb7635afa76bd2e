from supabase import AsyncClient, acreate_client

from marketplace.core.config import Settings


async def supabase_public(settings: Settings) -> AsyncClient:
    """
    Create an async Supabase client with the anon/public key.

    The client keeps the signed-in user's session, so every table and
    storage call it makes is subject to Row Level Security for that user.

    Note: one client per storefront session; it is created in the app
    lifespan and handed to the components that need it.
    """
    return await acreate_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
