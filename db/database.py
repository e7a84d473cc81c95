from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from env import DATABASE_URL

# sqlite needs this flag when sessions cross threads (tests, local runs)
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, pool_pre_ping=True, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
