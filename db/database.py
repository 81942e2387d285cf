from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase

class Base(DeclarativeBase):
    pass

def make_engine(url: str, echo: bool = False) -> Engine:
    connect_args = {}
    if url.startswith("sqlite"):
        # repository calls run on executor threads
        connect_args["check_same_thread"] = False
    return create_engine(url, echo=echo, future=True, pool_pre_ping=True, connect_args=connect_args)
