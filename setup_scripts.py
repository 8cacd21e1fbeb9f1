#!/usr/bin/env python
"""Create the allow-listed containers and install their server-side scripts."""
import asyncio
import logging

from cosmos_tasks.database import close_client, create_containers, get_client
from cosmos_tasks.services.server_scripts import register_scripts


async def main():
    try:
        containers = await create_containers(get_client())
        for container in containers.values():
            await register_scripts(container)
    finally:
        await close_client()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
    print("Containers and scripts are in place")
