# cart_api/data/database.py
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from cart_api.utils.settings import DATABASE_URL, DB_STATEMENT_TIMEOUT_MS

Base = declarative_base()


def build_engine(url: str = DATABASE_URL) -> Engine:
    if url.startswith("sqlite"):
        eng = create_engine(
            url,
            connect_args={
                "check_same_thread": False,
                "timeout": DB_STATEMENT_TIMEOUT_MS / 1000,
            },
        )

        # sqlite ignores FK constraints unless asked per connection
        @event.listens_for(eng, "connect")
        def _enable_foreign_keys(dbapi_conn, _record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return eng

    return create_engine(
        url,
        pool_pre_ping=True,
        connect_args={"options": f"-c statement_timeout={DB_STATEMENT_TIMEOUT_MS}"},
    )


engine = build_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(bind: Engine = engine) -> None:
    # models must be imported so they register on Base.metadata
    import cart_api.data.models  # noqa: F401

    Base.metadata.create_all(bind=bind)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
