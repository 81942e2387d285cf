from sqlalchemy.engine import Engine

from .database import Base

def init_db(engine: Engine):
    # Create tables (the unique index on source_url comes with the model)
    from . import models  # noqa: F401
    Base.metadata.create_all(bind=engine)

if __name__ == "__main__":
    from config.config import get_settings
    from .database import make_engine

    init_db(make_engine(get_settings().DATABASE_URL))
