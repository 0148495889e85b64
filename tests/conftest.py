import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session

import db
from models import GanttTask  # noqa: F401  register tables


@pytest.fixture
def in_memory_engine(monkeypatch):
    engine = db.create_db_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    monkeypatch.setattr(db, "get_engine", lambda: engine)
    monkeypatch.setattr(db, "init_db", lambda: None)
    return engine


@pytest.fixture
def db_session(in_memory_engine):
    with Session(in_memory_engine) as session:
        yield session


@pytest.fixture
def client(in_memory_engine):
    import api

    with TestClient(api.app) as c:
        yield c


@pytest.fixture
def seed_tree(db_session):
    """Insert a small tree; return {name: id}.

    Project
      Design (index 1)
        Mockups (index 0)
      Plan (index 0)
    Release
    """
    ids = {}

    def add(name, parent=None, index=None):
        task = GanttTask(name=name, parent_id=ids.get(parent), parent_index=index)
        db_session.add(task)
        db_session.commit()
        db_session.refresh(task)
        ids[name] = task.id

    add("Project", index=0)
    add("Design", "Project", 1)
    add("Mockups", "Design", 0)
    add("Plan", "Project", 0)
    add("Release", index=1)
    return ids
