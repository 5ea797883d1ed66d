# lootbox/scripts/seed_content.py
from __future__ import annotations

import asyncio

from sqlalchemy import delete

from lootbox.config import Settings
from lootbox.database import Database
from lootbox.database.models import Content, ContentType
from lootbox.database.models.content import dump_json_list
from lootbox.services.catalog import CatalogService

# (title, year, critics, audience, imdb, certified_fresh, verified_hot, platforms, genres)
MOVIES = [
    ("Dune: Part Two", 2024, 92, 95, 8.8, True, True, ["Max", "Apple TV", "Amazon Prime"], ["Sci-Fi", "Adventure"]),
    ("Anora", 2024, 93, 90, 7.4, True, False, ["Hulu", "Apple TV", "Amazon Prime"], ["Drama", "Comedy"]),
    ("Wicked", 2024, 92, 96, 7.4, True, True, ["In Theaters", "Coming to Digital"], ["Musical", "Fantasy"]),
    ("Conclave", 2024, 93, 86, 7.4, True, False, ["Apple TV", "Amazon Prime", "Vudu"], ["Thriller", "Drama"]),
    ("The Wild Robot", 2024, 98, 98, 8.3, True, True, ["Apple TV", "Amazon Prime", "Vudu"], ["Animation", "Family"]),
    ("Inside Out 2", 2024, 91, 95, 7.8, True, True, ["Disney+", "Apple TV", "Amazon Prime"], ["Animation", "Comedy"]),
    ("Challengers", 2024, 88, 85, 7.2, True, False, ["MGM+", "Amazon Prime", "Apple TV"], ["Drama", "Romance"]),
    ("Hit Man", 2024, 95, 87, 7.0, True, False, ["Netflix"], ["Comedy", "Crime"]),
    ("The Substance", 2024, 90, 83, 7.5, True, False, ["MUBI", "Apple TV", "Amazon Prime"], ["Horror"]),
    ("Civil War", 2024, 81, 85, 7.1, True, False, ["Max", "Apple TV", "Amazon Prime"], ["Action", "Thriller"]),
    ("All We Imagine as Light", 2024, 99, 88, 7.8, True, False, ["In Theaters", "Coming Soon"], ["Drama"]),
]

SERIES = [
    ("Shōgun", 2024, 99, 93, 8.7, True, True, ["Hulu", "Disney+"], ["Drama", "History"]),
    ("Fallout", 2024, 94, 89, 8.5, True, True, ["Prime Video"], ["Sci-Fi", "Action"]),
]


def _rows(kind: ContentType, data) -> list[Content]:
    return [
        Content(
            type=kind,
            title=title,
            year=year,
            critics_score=critics,
            audience_score=audience,
            imdb_rating=imdb,
            certified_fresh=fresh,
            verified_hot=hot,
            platforms_json=dump_json_list(platforms),
            genres_json=dump_json_list(genres),
            is_active=True,
        )
        for title, year, critics, audience, imdb, fresh, hot, platforms, genres in data
    ]


async def main() -> None:
    settings = Settings.load()
    db = Database.from_settings(settings)
    await db.init_models()

    async with db.session() as session:
        await session.execute(delete(Content))
        session.add_all(_rows(ContentType.MOVIE, MOVIES) + _rows(ContentType.SERIES, SERIES))
        await session.commit()

        res = await CatalogService.refresh_quality_scores(session)

    await db.close()
    print(f"✅ Seeded {res.scanned} titles.")


if __name__ == "__main__":
    asyncio.run(main())
