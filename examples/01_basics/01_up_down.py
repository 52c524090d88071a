#!/usr/bin/env python3
"""Up/Down Basics - Starting and stopping systems by run-level.

This example brings up a fake database, cache and API in RC order, then
tears them down in reverse. The cache and the database share RC 0, so
they start together; the API waits for both.

Run: python examples/01_basics/01_up_down.py
Plan it with the CLI: fireupdown plan 01_up_down:systems --app-dir examples/01_basics
"""
import asyncio

from fireupdown import down, plan, ref, up


async def start_db(config, state):
    await asyncio.sleep(0.05)
    print(f"  db connected to {config['dsn']}")
    return ref("db")(f"<db {config['dsn']}>")


async def start_cache(config, state):
    await asyncio.sleep(0.01)
    print("  cache warmed")
    return {"cache": "<cache>"}


def start_api(config, state):
    print(f"  api using {state['db']} and {state['cache']}")
    return {"api": "<api :8080>"}


def stop_api(config, state):
    print(f"  api stopped ({state['api']})")


async def stop_db(config, state):
    await asyncio.sleep(0.01)
    print(f"  db closed ({state['db']})")


systems = [
    {"rc": 0, "up": start_db, "down": stop_db, "name": "db"},
    {"rc": 0, "up": start_cache, "name": "cache"},
    {"rc": 1, "up": start_api, "down": stop_api, "name": "api"},
]


async def main():
    config = {"dsn": "sqlite:///demo.db"}

    print("=" * 60)
    print("Plan")
    print("=" * 60)
    for level in plan(systems, "up"):
        print(f"  rc {level.rc}: {', '.join(level.labels)}")

    print("\n[1] up")
    state = await up(systems)(config)
    print(f"  state: {state}")

    print("\n[2] down")
    await down(systems)(config, state=state)


if __name__ == "__main__":
    asyncio.run(main())
