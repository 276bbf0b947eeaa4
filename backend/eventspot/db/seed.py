"""
Schema creation and the fixed startup dataset.

`init_db` creates missing tables and seeds reference data plus one test
user the first time it runs against an empty database. Use Alembic
migrations for PostgreSQL deployments.
"""

from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from eventspot.db.base import Base
from eventspot.models import Artist, Category, Event, User, Venue
from eventspot.core.security import hash_password
from eventspot.core.logging import get_logger

logger = get_logger(__name__)

_IMG = "https://images.unsplash.com/photo-{}?ixlib=rb-4.0.3&auto=format&fit=crop&w={}&q=80"

TEST_USER = {
    "username": "testuser",
    "password": "password123",
    "name": "Test User",
    "email": "test@example.com",
    "phone": "9876543210",
    "city": "Delhi",
}

CATEGORIES = [
    {"name": "Concerts", "icon": "fa-music", "color": "primary"},
    {"name": "Theatre", "icon": "fa-theater-masks", "color": "secondary"},
    {"name": "Comedy", "icon": "fa-laugh-beam", "color": "accent"},
    {"name": "Cultural", "icon": "fa-om", "color": "green"},
    {"name": "Tech Fest", "icon": "fa-robot", "color": "purple"},
    {"name": "Food Fests", "icon": "fa-utensils", "color": "blue"},
    {"name": "Film Festivals", "icon": "fa-film", "color": "red"},
]

VENUES = [
    {"name": "Siri Fort Auditorium", "address": "August Kranti Marg", "city": "Delhi",
     "state": "Delhi", "capacity": 2000, "image": _IMG.format("1578944032637-f09897c5233d", 1600)},
    {"name": "JLN Stadium", "address": "Pragati Vihar", "city": "Delhi",
     "state": "Delhi", "capacity": 60000, "image": _IMG.format("1606639421367-95576aa1c747", 1600)},
    {"name": "NCPA", "address": "Nariman Point", "city": "Mumbai",
     "state": "Maharashtra", "capacity": 1200, "image": _IMG.format("1608234807905-4466023792f5", 1600)},
    {"name": "Kamani Auditorium", "address": "Copernicus Marg", "city": "Delhi",
     "state": "Delhi", "capacity": 750, "image": _IMG.format("1571624436279-b272aff752b5", 1600)},
    {"name": "Phoenix Marketcity", "address": "Whitefield", "city": "Mumbai",
     "state": "Maharashtra", "capacity": 5000, "image": _IMG.format("1624293258267-959a7ed72a4e", 1600)},
    {"name": "Habitat Centre", "address": "Lodhi Road", "city": "Delhi",
     "state": "Delhi", "capacity": 1000, "image": _IMG.format("1572844986430-997270651e8a", 1600)},
]

ARTISTS = [
    {"name": "Arijit Singh", "type": "Musician", "image": _IMG.format("1593697972646-2f348871bd56", 800),
     "bio": "Popular Bollywood playback singer"},
    {"name": "Zakir Hussain", "type": "Tabla Maestro", "image": _IMG.format("1616559051446-a19f04b52de6", 800),
     "bio": "World-renowned tabla player and composer"},
    {"name": "Vir Das", "type": "Comedian", "image": _IMG.format("1527697911937-ffd76b048f15", 800),
     "bio": "Indian comedian, actor and musician"},
    {"name": "A.R. Rahman", "type": "Composer", "image": _IMG.format("1508674861872-a51e06c50c9b", 800),
     "bio": "Oscar-winning composer and music producer"},
    {"name": "Shreya Ghoshal", "type": "Singer", "image": _IMG.format("1565116175827-64847f972a3f", 800),
     "bio": "Popular female playback singer"},
    {"name": "Kanan Gill", "type": "Comedian", "image": _IMG.format("1533551445-66165599e97c", 800),
     "bio": "Stand-up comedian and YouTuber"},
]


def _day(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


# venue_id / category_id / artist_id refer to the 1-based positions above
EVENTS = [
    {"title": "Navratri Festival 2023",
     "description": "Experience the colors and music of India's most vibrant festival",
     "image": _IMG.format("1587825140708-dfaf72ae4b04", 1600), "date": _day(2023, 10, 15),
     "price": 1000, "venue_id": 2, "category_id": 4, "artist_id": None,
     "is_featured": True, "is_trending": False, "total_seats": 5000, "available_seats": 3500},
    {"title": "Comedy Nights with Vir Das",
     "description": "An evening of laughter and wit with India's top comedian",
     "image": _IMG.format("1592213299587-7bbb135c541d", 1600), "date": _day(2023, 9, 28),
     "price": 800, "venue_id": 1, "category_id": 3, "artist_id": 3,
     "is_featured": True, "is_trending": False, "total_seats": 500, "available_seats": 200},
    {"title": "Arijit Singh Live in Concert",
     "description": "Experience the magical voice of Bollywood's favorite singer",
     "image": _IMG.format("1601124178830-70b4bece5b71", 1600), "date": _day(2023, 11, 12),
     "price": 2500, "venue_id": 2, "category_id": 1, "artist_id": 1,
     "is_featured": True, "is_trending": True, "total_seats": 10000, "available_seats": 5000},
    {"title": "Sunburn Music Festival",
     "description": "India's premier electronic dance music festival",
     "image": _IMG.format("1563841930606-67e2bce48b78", 1600), "date": _day(2023, 12, 28),
     "price": 1999, "venue_id": 2, "category_id": 1, "artist_id": None,
     "is_featured": False, "is_trending": True, "total_seats": 20000, "available_seats": 15000},
    {"title": "Rahman Live in Concert",
     "description": "Musical evening with the Mozart of Madras",
     "image": _IMG.format("1470229722913-7c0e2dbbafd3", 1600), "date": _day(2023, 10, 15),
     "price": 2500, "venue_id": 2, "category_id": 1, "artist_id": 4,
     "is_featured": False, "is_trending": True, "total_seats": 5000, "available_seats": 1500},
    {"title": "Zakir Hussain - Masters of Percussion",
     "description": "A mesmerizing evening of Indian classical music",
     "image": _IMG.format("1508997449629-303059a039c0", 1600), "date": _day(2023, 11, 5),
     "price": 1800, "venue_id": 3, "category_id": 1, "artist_id": 2,
     "is_featured": False, "is_trending": True, "total_seats": 1000, "available_seats": 300},
    {"title": "The Comedy Factory",
     "description": "An evening of laughter with top Indian comedians",
     "image": _IMG.format("1425421669292-0c3da3b8f529", 1600), "date": _day(2023, 10, 22),
     "price": 799, "venue_id": 6, "category_id": 3, "artist_id": 6,
     "is_featured": False, "is_trending": True, "total_seats": 500, "available_seats": 100},
]


async def seed_database(db: AsyncSession) -> None:
    """Insert the fixed dataset. Parents are flushed first so the ids line up."""
    db.add(User(**{**TEST_USER, "password": hash_password(TEST_USER["password"])}))
    db.add_all([Category(**row) for row in CATEGORIES])
    db.add_all([Venue(**row) for row in VENUES])
    db.add_all([Artist(**row) for row in ARTISTS])
    await db.flush()
    db.add_all([Event(**row) for row in EVENTS])
    await db.commit()
    logger.info(
        "database_seeded",
        categories=len(CATEGORIES),
        venues=len(VENUES),
        artists=len(ARTISTS),
        events=len(EVENTS),
    )


async def init_db(engine: AsyncEngine, sessionmaker: async_sessionmaker[AsyncSession], seed: bool = True) -> None:
    """
    Create tables and seed them when the users table is empty.
    Failures are logged and startup continues, the API then answers with
    whatever the database already holds.
    """
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        if not seed:
            return

        async with sessionmaker() as db:
            user_count = (await db.execute(select(func.count()).select_from(User))).scalar()
            if user_count:
                logger.info("database_seed_skipped", reason="already_populated")
                return
            await seed_database(db)
    except SQLAlchemyError as e:
        logger.exception("database_init_failed", error=str(e))
