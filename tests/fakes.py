"""
In-memory stand-ins for the Supabase pieces the storefront talks to.

They implement the same small contracts as SupabaseStore, SupabaseStorage
and the auth client, nothing more.
"""
import asyncio
import itertools
import uuid
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from supabase import AuthError

from marketplace.core.errors import RemoteFailure

UNIQUE_KEYS = {
    "cart_items": ("user_id", "product_id"),
    "wishlist_items": ("user_id", "product_id"),
}

EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


class InMemoryStore:
    def __init__(self):
        self.tables: dict[str, list[dict]] = defaultdict(list)
        self.calls: list[tuple[str, str]] = []
        self.fail_on: set[tuple[str, str]] = set()
        self._clock = itertools.count(1)

    def _now(self) -> str:
        return (EPOCH + timedelta(seconds=next(self._clock))).isoformat()

    def _check(self, action: str, table: str) -> None:
        self.calls.append((action, table))
        if (action, table) in self.fail_on:
            raise RemoteFailure(f"{action} on {table} rejected")

    @staticmethod
    def _matches(row: dict, filters) -> bool:
        return all(str(row.get(k)) == str(v) for k, v in (filters or {}).items())

    def rows(self, table: str, **filters) -> list[dict]:
        return [r for r in self.tables[table] if self._matches(r, filters)]

    def count_calls(self, action: str, table: str) -> int:
        return self.calls.count((action, table))

    async def select(self, table, filters=None, order=None, joins=()):
        self._check("select", table)
        rows = [dict(r) for r in self.tables[table] if self._matches(r, filters)]
        if order is not None:
            rows.sort(key=lambda r: r[order.column], reverse=order.desc)
        for join in joins:
            for row in rows:
                target = next(
                    (
                        t
                        for t in self.tables[join.table]
                        if str(t["id"]) == str(row.get(join.on))
                    ),
                    None,
                )
                if target is not None and join.columns != "*":
                    columns = [c.strip() for c in join.columns.split(",")]
                    target = {c: target.get(c) for c in columns}
                row[join.alias] = dict(target) if target is not None else None
        return rows

    async def insert(self, table, row):
        self._check("insert", table)
        key = UNIQUE_KEYS.get(table)
        if key and any(
            all(str(r[k]) == str(row[k]) for k in key) for r in self.tables[table]
        ):
            raise RemoteFailure("duplicate key value violates unique constraint")

        now = self._now()
        stored = {"id": str(uuid.uuid4()), "created_at": now, "updated_at": now, **row}
        self.tables[table].append(stored)
        return dict(stored)

    async def update(self, table, filters, patch):
        self._check("update", table)
        for row in self.tables[table]:
            if self._matches(row, filters):
                row.update(patch)
                row["updated_at"] = self._now()

    async def delete(self, table, filters):
        self._check("delete", table)
        self.tables[table] = [
            r for r in self.tables[table] if not self._matches(r, filters)
        ]

    # ---- seeding ----

    def seed_profile(self, user_id, name="Asha", phone="9876543210", email=None):
        now = self._now()
        row = {
            "id": str(user_id),
            "name": name,
            "phone": phone,
            "email": email or f"{name.lower()}@example.com",
            "created_at": now,
            "updated_at": now,
        }
        self.tables["profiles"].append(row)
        return row

    def seed_product(self, user_id, name="Desk lamp", price=499.0):
        now = self._now()
        row = {
            "id": str(uuid.uuid4()),
            "user_id": str(user_id),
            "name": name,
            "price": price,
            "description": "Barely used, works great.",
            "images": ["https://example.test/lamp.png"],
            "created_at": now,
            "updated_at": now,
        }
        self.tables["products"].append(row)
        return uuid.UUID(row["id"])

    def seed_cart_item(self, user_id, product_id, quantity=1):
        now = self._now()
        self.tables["cart_items"].append(
            {
                "id": str(uuid.uuid4()),
                "user_id": str(user_id),
                "product_id": str(product_id),
                "quantity": quantity,
                "created_at": now,
                "updated_at": now,
            }
        )

    def seed_wishlist_item(self, user_id, product_id):
        self.tables["wishlist_items"].append(
            {
                "id": str(uuid.uuid4()),
                "user_id": str(user_id),
                "product_id": str(product_id),
                "created_at": self._now(),
            }
        )


class GatedStore(InMemoryStore):
    """
    Store whose chosen actions block until the test opens the gate.
    """

    def __init__(self):
        super().__init__()
        self.hold: set[str] = set()
        self.gate = asyncio.Event()
        self.entered = asyncio.Event()

    async def _wait(self, action: str) -> None:
        if action in self.hold:
            self.entered.set()
            await self.gate.wait()

    async def select(self, table, filters=None, order=None, joins=()):
        await self._wait("select")
        return await super().select(table, filters, order, joins)

    async def update(self, table, filters, patch):
        await self._wait("update")
        await super().update(table, filters, patch)


class FakeStorage:
    base_url = "https://demo.supabase.co/storage/v1/object/public/product-images/"

    def __init__(self):
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.removed: list[str] = []
        self.fail_after: int | None = None

    async def upload(self, path, data, content_type):
        if self.fail_after is not None and len(self.objects) >= self.fail_after:
            raise RemoteFailure("Failed to upload file: storage unavailable")
        if path in self.objects:
            raise RemoteFailure("Failed to upload file: The resource already exists")
        self.objects[path] = (data, content_type)
        return self.base_url + path

    async def remove(self, paths):
        for path in paths:
            self.objects.pop(path, None)
            self.removed.append(path)


class FakeAuthError(AuthError):
    def __init__(self, message: str):
        Exception.__init__(self, message)
        self.message = message


def make_session(user_id, email):
    return SimpleNamespace(user=SimpleNamespace(id=str(user_id), email=email))


class FakeAuth:
    """
    Mimics the bits of the Supabase auth client the storefront uses.
    Every session change is emitted to the registered callbacks.
    """

    def __init__(self, session=None):
        self.session = session
        self.accounts: dict[str, tuple[str, uuid.UUID]] = {}
        self.callbacks: list = []
        self.unsubscribed = False
        self.sign_up_metadata: dict = {}

    def add_account(self, email, password, user_id=None):
        user_id = user_id or uuid.uuid4()
        self.accounts[email] = (password, user_id)
        return user_id

    def switch_to(self, user_id, email="someone@example.com"):
        self.session = make_session(user_id, email) if user_id else None
        self._emit("SIGNED_IN" if user_id else "SIGNED_OUT")

    def _emit(self, event):
        for callback in list(self.callbacks):
            callback(event, self.session)

    async def get_session(self):
        return self.session

    def on_auth_state_change(self, callback):
        self.callbacks.append(callback)

        def unsubscribe():
            self.unsubscribed = True
            self.callbacks.remove(callback)

        return SimpleNamespace(unsubscribe=unsubscribe)

    async def sign_up(self, credentials):
        email = credentials["email"]
        if email in self.accounts:
            raise FakeAuthError("User already registered")
        user_id = self.add_account(email, credentials["password"])
        self.sign_up_metadata[email] = credentials["options"]["data"]
        self.session = make_session(user_id, email)
        self._emit("SIGNED_IN")
        return SimpleNamespace(user=self.session.user, session=self.session)

    async def sign_in_with_password(self, credentials):
        account = self.accounts.get(credentials["email"])
        if account is None or account[0] != credentials["password"]:
            raise FakeAuthError("Invalid login credentials")
        self.session = make_session(account[1], credentials["email"])
        self._emit("SIGNED_IN")
        return SimpleNamespace(user=self.session.user, session=self.session)

    async def sign_out(self):
        self.session = None
        self._emit("SIGNED_OUT")
