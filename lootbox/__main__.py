import asyncio

from lootbox.main import main

asyncio.run(main())
