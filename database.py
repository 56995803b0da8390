import asyncio
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from config import DATABASE_URL

engine_options = {}
if DATABASE_URL.startswith("sqlite"):
    engine_options = {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}

async_engine = create_async_engine(DATABASE_URL, future=True, **engine_options)
async_session_maker = sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)
Base = declarative_base()

store_lock = asyncio.Lock()

async def init_models():
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

async def dispose_models():
    await async_engine.dispose()

async def get_db():
    async with store_lock:
        async with async_session_maker() as session:
            yield session
