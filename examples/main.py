# examples/main.py
"""
quarry example: a FastAPI app exposing filtered post listings.

    uvicorn examples.main:app --reload
    curl "http://localhost:8000/post?published=true&title=hello"
"""

from fastapi import APIRouter, FastAPI
from sqlalchemy import Boolean, String, create_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column
from sqlalchemy.pool import StaticPool

from quarry import BuilderRegistry
from quarry.api import QueryRouter
from quarry.core.logging import log


class Base(DeclarativeBase):
    pass


class Post(Base):
    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(200))
    published: Mapped[bool] = mapped_column(Boolean, default=False)


engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)


def get_db():
    with Session(engine) as session:
        yield session


# ? Builders -----------------------------------------------------------------------------------------

queries = BuilderRegistry()
posts = queries.register(Post, whitelist=["title", "published", "q"])


@posts.override("q")
def search(query, value, tail):
    # Free text search instead of an equality match.
    return posts.apply(query.where(Post.title.ilike(f"%{value}%")), tail)


# ? App ----------------------------------------------------------------------------------------------

app = FastAPI(title="quarry example")
router = APIRouter()

log.section("Starting Application")

with log.timed("Database initialization"):
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        session.add_all([
            Post(title="hello", published=True),
            Post(title="hello again", published=False),
        ])
        session.commit()

QueryRouter(posts, get_db, router).generate_routes()
app.include_router(router)
queries.describe()
