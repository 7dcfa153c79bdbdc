# gantt_app/database.py
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from .settings import DATABASE_URL, settings


def make_engine(url: str, echo: bool = False) -> Engine:
    """Crea el motor; en SQLite activa las claves foráneas en cada conexión."""
    connect_args = {}
    is_sqlite = url.startswith("sqlite")
    if is_sqlite:
        # La sesión puede usarse desde el threadpool de FastAPI
        connect_args["check_same_thread"] = False

    engine = create_engine(
        url, echo=echo, pool_pre_ping=True, connect_args=connect_args
    )

    if is_sqlite:
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


# Creamos el motor de conexión
engine = make_engine(DATABASE_URL, echo=settings.sql_echo)

# Creamos una fábrica de sesiones
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base para nuestros modelos (tablas)
Base = declarative_base()


# Función de dependencia para la API:
# una sesión por request, que siempre se cierra al terminar
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
