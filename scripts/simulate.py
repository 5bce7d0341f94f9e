"""
Order Simulation Script

Seeds the menu and fires concurrent orders at a running server.
Run from project root: python scripts/simulate.py

Author: Khalil_Bannouri
Version: 1.0.0
"""

import asyncio
import random
import sys
import time
import argparse
from datetime import datetime
from typing import Any

import httpx

# Configuration
API_BASE_URL = "http://localhost:8001"
TOTAL_ORDERS = 50
DEFAULT_IMAGE_URL = "https://upload.wikimedia.org/wikipedia/commons/a/a3/Eq_it-na_pizza-margherita_sep2005_sml.jpg"

# Sample menu
MENU_ITEMS = [
    {"name": "Margherita Pizza", "description": "Tomato sauce, Mozzarella and basil", "price": 59},
    {"name": "Polenta", "description": "Creamy polenta with mushrooms", "price": 48},
    {"name": "Roasted Salmon", "description": "Roasted Salmon on pumpkin cream", "price": 108},
    {"name": "Caesar Salad", "description": "Romaine, parmesan and croutons", "price": 42},
    {"name": "Tiramisu", "description": "Mascarpone, coffee and cocoa", "price": 34},
]


def generate_random_order() -> dict[str, Any]:
    """Generate a random order payload; some fall below the minimum."""
    names = random.sample([item["name"] for item in MENU_ITEMS], k=random.randint(1, 3))
    return {"productsOrdered": {name: random.randint(1, 3) for name in names}}


async def seed_menu(client: httpx.AsyncClient, image_url: str) -> int:
    """Create the sample products; existing ones are left alone."""
    created = 0
    for item in MENU_ITEMS:
        response = await client.post(
            f"{API_BASE_URL}/products",
            json={**item, "image": image_url},
            timeout=30.0,
        )
        if response.status_code == 200:
            created += 1
            print(f"   ✅ {item['name']} created")
        else:
            print(f"   ⚠️ {item['name']}: {response.status_code} {response.text[:80]}")
    return created


async def send_order(
    client: httpx.AsyncClient,
    order_num: int
) -> dict[str, Any]:
    """Send one order and time it."""
    payload = generate_random_order()
    start_time = time.time()

    try:
        response = await client.post(
            f"{API_BASE_URL}/orders",
            json=payload,
            timeout=30.0
        )
    except httpx.HTTPError as e:
        return {
            "order_num": order_num,
            "success": False,
            "error": str(e)[:100],
            "time": round(time.time() - start_time, 3),
        }

    elapsed = round(time.time() - start_time, 3)
    if response.status_code == 200:
        data = response.json()
        return {
            "order_num": order_num,
            "success": True,
            "order_id": data.get("id"),
            "total": data.get("price"),
            "time": elapsed,
        }
    return {
        "order_num": order_num,
        "success": False,
        "status": response.status_code,
        "error": response.text[:100],
        "time": elapsed,
    }


async def run_simulation(num_orders: int, image_url: str, seed: bool) -> dict[str, Any]:
    """
    Seed the menu (optionally) and fire ``num_orders`` concurrent orders.
    """
    print("=" * 70)
    print("🔥 ORDER SIMULATION")
    print("=" * 70)
    print(f"📋 Total Orders: {num_orders}")
    print(f"🎯 Target: {API_BASE_URL}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    async with httpx.AsyncClient() as client:
        if seed:
            print("\n🍕 Seeding menu...")
            await seed_menu(client, image_url)

        print("\n🚀 Firing orders...\n")
        start_time = time.time()
        results = await asyncio.gather(
            *[send_order(client, i + 1) for i in range(num_orders)]
        )
        total_time = round(time.time() - start_time, 2)

        recent = await client.get(f"{API_BASE_URL}/orders-from-last-day")

    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]

    print("\n" + "=" * 70)
    print("📊 SIMULATION RESULTS")
    print("=" * 70)
    print(f"\n✅ Accepted Orders: {len(successful)}/{num_orders}")
    print(f"❌ Rejected Orders: {len(failed)}/{num_orders}")
    print(f"⏱️  Total Time: {total_time}s")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        revenue = sum(r.get("total") or 0 for r in successful)
        print(f"\n📈 Average Response: {avg_time}s")
        print(f"   💰 Total Revenue: {revenue}")

    if failed:
        print(f"\n⚠️  Rejected Order Details (showing first 5):")
        for f in failed[:5]:
            print(f"   Order #{f['order_num']} [{f.get('status', 'error')}]: {f.get('error')}")

    if recent.status_code == 200:
        print(f"\n🕒 Orders from the last day: {len(recent.json())}")

    print("=" * 70)

    return {
        "total": num_orders,
        "successful": len(successful),
        "failed": len(failed),
        "total_time": total_time,
        "results": results,
    }


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Order Simulation Script")
    parser.add_argument("--orders", type=int, default=TOTAL_ORDERS, help="Number of orders")
    parser.add_argument("--image-url", default=DEFAULT_IMAGE_URL, help="Image URL for seeded products")
    parser.add_argument("--skip-seed", action="store_true", help="Do not create the sample menu")
    args = parser.parse_args()

    summary = asyncio.run(run_simulation(args.orders, args.image_url, not args.skip_seed))
    sys.exit(0 if summary["successful"] else 1)
