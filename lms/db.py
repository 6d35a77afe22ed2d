from sqlmodel import SQLModel, create_engine, Session

from lms import config

DATABASE_URL = config.DATABASE_URL

connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(DATABASE_URL, echo=False, connect_args=connect_args)


def init_db():
    # table classes must be registered on the metadata before create_all
    import lms.models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session():
    return Session(engine, expire_on_commit=False)
