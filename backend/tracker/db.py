from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

# SQLAlchemy Base class for models to inherit
Base = declarative_base()


def make_engine(database_url: str):
    """Create an engine for `database_url`.

    In-memory sqlite gets a single shared connection so every session sees
    the same database; sqlite also needs foreign keys switched on for
    ON DELETE CASCADE to apply.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url:
            kwargs["poolclass"] = StaticPool
        engine = create_engine(database_url, **kwargs)

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(
        database_url,
        pool_pre_ping=True,   # helps avoid stale connections
    )


def make_session_factory(engine):
    """Factory that creates DB sessions bound to `engine`."""
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def create_tables(engine) -> None:
    # Import models so their tables are registered on Base.metadata
    from tracker.models import run, route_point, gps_measurement, gps_calibration  # noqa: F401

    Base.metadata.create_all(bind=engine)
