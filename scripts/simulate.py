"""
Order Flow Simulation Script

Drives the running API through the customer journey for many users at once:
register → login → fill cart → place order → fetch orders.
Run from project root: python scripts/simulate.py --users 20
"""

import argparse
import asyncio
import random
import sys
import time
import uuid
from typing import Any

import httpx

# Configuration
API_BASE_URL = "http://localhost:4000"
TOTAL_USERS = 10

FIRST_NAMES = ["Aarav", "Diya", "Kabir", "Meera", "Rohan", "Ananya", "Vivaan", "Isha"]
STREETS = ["MG Road", "Park Street", "Linking Road", "Brigade Road", "Anna Salai"]
MENU_ITEMS = [
    {"_id": "1", "name": "Greek Salad", "price": 12},
    {"_id": "2", "name": "Veg Salad", "price": 18},
    {"_id": "5", "name": "Lasagna Rolls", "price": 14},
    {"_id": "9", "name": "Ripple Ice Cream", "price": 14},
    {"_id": "17", "name": "Cheese Pasta", "price": 12},
    {"_id": "25", "name": "Butter Noodles", "price": 14},
]
DELIVERY_FEE = 2


def generate_random_customer() -> dict[str, str]:
    """Generate random customer credentials."""
    name = random.choice(FIRST_NAMES)
    return {
        "name": name,
        "email": f"{name.lower()}.{uuid.uuid4().hex[:8]}@example.com",
        "password": uuid.uuid4().hex[:12],
    }


def generate_random_items() -> list[dict]:
    """Generate random order items."""
    picked = random.sample(MENU_ITEMS, k=random.randint(1, 3))
    return [{**item, "quantity": random.randint(1, 3)} for item in picked]


def generate_address(customer: dict[str, str]) -> dict[str, Any]:
    return {
        "firstName": customer["name"],
        "lastName": "Test",
        "email": customer["email"],
        "street": f"{random.randint(1, 999)} {random.choice(STREETS)}",
        "city": "Bengaluru",
        "state": "KA",
        "zipcode": "560001",
        "country": "India",
        "phone": f"98{random.randint(10000000, 99999999)}",
    }


async def run_customer(client: httpx.AsyncClient, num: int) -> dict[str, Any]:
    """Run one customer's journey and report where it stopped."""
    customer = generate_random_customer()
    start_time = time.time()

    def result(success: bool, stage: str, error: str | None = None) -> dict[str, Any]:
        return {
            "num": num,
            "success": success,
            "stage": stage,
            "error": error,
            "time": round(time.time() - start_time, 3),
        }

    try:
        response = await client.post("/api/user/register", json=customer)
        if response.status_code != 201:
            return result(False, "register", response.text[:100])

        response = await client.post(
            "/api/user/login",
            json={"email": customer["email"], "password": customer["password"]},
        )
        if response.status_code != 200:
            return result(False, "login", response.text[:100])
        headers = {"Authorization": f"Bearer {response.json()['token']}"}

        items = generate_random_items()
        for item in items:
            for _ in range(item["quantity"]):
                await client.post("/api/cart/add", json={"itemId": item["_id"]}, headers=headers)

        amount = sum(i["price"] * i["quantity"] for i in items) + DELIVERY_FEE
        response = await client.post(
            "/api/order/place",
            json={"items": items, "amount": amount, "address": generate_address(customer)},
            headers=headers,
        )
        if response.status_code != 200:
            return result(False, "place", response.text[:100])

        response = await client.post("/api/order/user-orders", json={}, headers=headers)
        orders = response.json().get("orders", [])
        if response.status_code != 200 or len(orders) != 1:
            return result(False, "user-orders", response.text[:100])

        cart = await client.post("/api/cart/get", json={}, headers=headers)
        if cart.json().get("cartData") != {}:
            return result(False, "cart-cleared", cart.text[:100])

        return result(True, "done")

    except httpx.HTTPError as e:
        return result(False, "connection", str(e)[:100])


async def run_simulation(base_url: str, total: int) -> bool:
    print("=" * 60)
    print(f"🍅 Simulating {total} customers against {base_url}")
    print("=" * 60)

    async with httpx.AsyncClient(base_url=base_url, timeout=30.0) as client:
        results = await asyncio.gather(*(run_customer(client, n) for n in range(1, total + 1)))

    ok = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]
    times = [r["time"] for r in results]

    print(f"\n✅ Completed: {len(ok)}/{total}")
    if times:
        print(f"⏱  Avg journey: {sum(times) / len(times):.3f}s, max {max(times):.3f}s")
    for r in failed[:10]:
        print(f"❌ #{r['num']} stopped at {r['stage']}: {r['error']}")

    return not failed


def main() -> None:
    parser = argparse.ArgumentParser(description="Order Flow Simulation")
    parser.add_argument("--url", default=API_BASE_URL, help="API base URL")
    parser.add_argument("--users", type=int, default=TOTAL_USERS, help="Concurrent customers")
    args = parser.parse_args()

    success = asyncio.run(run_simulation(args.url, args.users))
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
