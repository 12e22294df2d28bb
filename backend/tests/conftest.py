"""Test fixtures — in-memory SQLite database, seeded course and test client."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from coursefiles.config import settings
from coursefiles.database import get_db
from coursefiles.main import create_app
from coursefiles.models import BookChapter, Context, CourseModule, FileRecord, User
from coursefiles.models.base import Base
from coursefiles.models.context import (
    CONTEXT_COURSE,
    CONTEXT_MODULE,
    CONTEXT_SYSTEM,
)
from coursefiles.services import init_services, shutdown_services
from coursefiles.services.events import EventBus
from coursefiles.services.strings import StringManager

COURSE_ID = 10


@pytest_asyncio.fixture
async def db_session():
    """Provide an async in-memory SQLite session for tests."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def course(db_session):
    """Course 10 (context 2) with a folder, a book and an assignment.

    Context 4 belongs to another course, context 23 to a course whose path
    shares the "/1/2" prefix without being below it.
    """
    db_session.add_all([
        Context(id=1, contextlevel=CONTEXT_SYSTEM, instanceid=0, path="/1", depth=1),
        Context(id=2, contextlevel=CONTEXT_COURSE, instanceid=COURSE_ID, path="/1/2", depth=2),
        Context(id=3, contextlevel=CONTEXT_MODULE, instanceid=100, path="/1/2/3", depth=3),
        Context(id=5, contextlevel=CONTEXT_MODULE, instanceid=101, path="/1/2/5", depth=3),
        Context(id=6, contextlevel=CONTEXT_MODULE, instanceid=102, path="/1/2/6", depth=3),
        Context(id=4, contextlevel=CONTEXT_COURSE, instanceid=20, path="/1/4", depth=2),
        Context(id=23, contextlevel=CONTEXT_COURSE, instanceid=30, path="/1/23", depth=2),
        CourseModule(id=100, course=COURSE_ID, modname="folder", instance=1),
        CourseModule(id=101, course=COURSE_ID, modname="book", instance=1),
        CourseModule(id=102, course=COURSE_ID, modname="assign", instance=1),
        CourseModule(id=200, course=20, modname="folder", instance=2),
        BookChapter(id=1, bookid=1, title="Intro", content='<img src="@@PLUGINFILE@@/diagram.png">'),
        User(id=1, username="alice", firstname="Alice", lastname="Smith"),
    ])
    files = {
        "syllabus": FileRecord(id=1, contextid=2, component="course", filearea="section",
                               itemid=7, filename="syllabus.pdf", mimetype="application/pdf",
                               license="cc", userid=1),
        "photo": FileRecord(id=2, contextid=3, component="mod_folder", filearea="content",
                            filename="photo.jpg", mimetype="image/jpeg",
                            license="allrightsreserved"),
        "dir": FileRecord(id=3, contextid=3, component="mod_folder", filearea="content",
                          filename=".", mimetype=None),
        "diagram": FileRecord(id=4, contextid=5, component="mod_book", filearea="chapter",
                              itemid=1, filename="diagram.png", mimetype="image/png"),
        "essay": FileRecord(id=5, contextid=6, component="assignsubmission_file",
                            filearea="submission_files", itemid=3, filename="essay.docx",
                            mimetype="application/vnd.openxmlformats-officedocument"
                                     ".wordprocessingml.document"),
        "brief": FileRecord(id=6, contextid=6, component="mod_assign", filearea="intro",
                            filename="brief.txt", mimetype="text/plain"),
        "blob": FileRecord(id=7, contextid=3, component="mod_folder", filearea="content",
                           filename="data.bin", mimetype="application/octet-stream"),
        "foreign": FileRecord(id=8, contextid=4, component="mod_folder", filearea="content",
                              filename="foreign.pdf", mimetype="application/pdf",
                              license="public"),
        "trap": FileRecord(id=9, contextid=23, component="mod_resource", filearea="content",
                           filename="trap.pdf", mimetype="application/pdf", license="public"),
        "legacy": FileRecord(id=10, contextid=2, component="course", filearea="legacy",
                             filename="old.zip", mimetype="application/zip"),
    }
    db_session.add_all(files.values())
    await db_session.commit()

    course_context = await db_session.get(Context, 2)
    return {"context": course_context, "files": files}


@pytest.fixture
def strings():
    return StringManager()


@pytest.fixture
def event_bus():
    return EventBus()


def make_token(capabilities=(), courses=None, username="editor", uid=1) -> str:
    claims = {"sub": username, "uid": uid, "capabilities": list(capabilities)}
    if courses is not None:
        claims["courses"] = list(courses)
    return jwt.encode(claims, settings.secret_key, algorithm=settings.token_algorithm)


@pytest_asyncio.fixture
async def client(db_session: AsyncSession):
    """Provide an async test client with overridden DB dependency."""
    app = create_app()
    await init_services()

    async def _override_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    await shutdown_services()


@pytest.fixture
def auth():
    """Build an Authorization header carrying the given capabilities."""
    def _headers(*capabilities, courses=None):
        return {"Authorization": f"Bearer {make_token(capabilities, courses)}"}
    return _headers
