"""Seed the catalogue with a handful of well-known titles.

Skips entirely when the animes table already has rows, so it is safe to run
on every deploy.

Usage:
    python -m scripts.seed_animes
"""

import asyncio

from sqlalchemy import func, select

import app.models  # noqa: F401
from app.models.anime import Anime
from app.models.base import AsyncSessionLocal, Base, engine
from app.services.import_service import PLACEHOLDER_IMAGE

SEED_ANIMES = [
    {
        "title": "Naruto Shippuden",
        "synopsis": (
            "Naruto Uzumaki, um jovem ninja impulsivo e determinado, retorna à sua vila natal, "
            "Konoha, após dois anos e meio de treinamento intenso com Jiraiya..."
        ),
        "genre": "Shōnen",
        "year": "2004",
        "rating": "12+",
        "duration": "1h 49m",
        "image_url": PLACEHOLDER_IMAGE,
    },
    {
        "title": "Demon Slayer",
        "synopsis": (
            "Tanjirou Kamado é um bondoso garoto de família que vende carvão para sustentar sua mãe "
            "e seus irmãos mais novos. Um dia, ao voltar para casa, ele encontra sua família "
            "brutalmente assassinada por demônios..."
        ),
        "genre": "Shōnen",
        "year": "2019",
        "rating": "16+",
        "duration": "1h 26m",
        "image_url": PLACEHOLDER_IMAGE,
    },
    {
        "title": "Jujutsu Kaisen",
        "synopsis": (
            "Yuuji Itadori é um estudante do ensino médio que possui uma força física extraordinária. "
            "Apesar de sua habilidade, ele prefere levar uma vida normal e evitar envolvimento com o oculto..."
        ),
        "genre": "Shōnen",
        "year": "2020",
        "rating": "16+",
        "duration": "1h 45m",
        "image_url": PLACEHOLDER_IMAGE,
    },
    {
        "title": "Attack on Titan",
        "synopsis": (
            "Em um mundo onde a humanidade vive dentro de cidades cercadas por enormes muralhas "
            "devido aos Titãs, criaturas humanoides gigantes que devoram humanos..."
        ),
        "genre": "Shōnen",
        "year": "2013",
        "rating": "16+",
        "duration": "1h 57m",
        "image_url": PLACEHOLDER_IMAGE,
    },
    {
        "title": "Sousou no Frieren",
        "synopsis": (
            "Após a derrota do Rei Demônio, a heroína humana Himmel e seus companheiros, o anão Eisen "
            "e o elfo Frieren, embarcam em uma jornada para explorar o mundo e viver novas aventuras..."
        ),
        "genre": "Shōnen",
        "year": "2023",
        "rating": "12+",
        "duration": "1h 30m",
        "image_url": PLACEHOLDER_IMAGE,
    },
]


async def seed() -> int:
    """Insert SEED_ANIMES into an empty catalogue. Returns how many rows were created."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        try:
            count = (await db.execute(select(func.count(Anime.id)))).scalar() or 0
            if count > 0:
                print(f"Catalogue already has {count} animes, skipping seed")
                return 0

            db.add_all([Anime(**data) for data in SEED_ANIMES])
            await db.commit()
            print(f"\nDone: {len(SEED_ANIMES)} animes created")
            return len(SEED_ANIMES)

        except Exception as e:
            await db.rollback()
            print(f"Error: {e}")
            raise


if __name__ == "__main__":
    asyncio.run(seed())
