"""Database Configuration and Connection Management Module

This module handles database connectivity, session management, and table operations
for the interview practice service. It provides PostgreSQL connection with connection
pooling, and falls back to whatever DATABASE_URL points at (SQLite in tests).

The module contains functions for database session management, table creation,
and connection configuration. The credit gate, feedback service and feedback view
all open their sessions through SessionLocal.

Dependencies:
- sqlalchemy: For database ORM and connection management.
- dotenv: For environment variable loading.
- loguru: For logging operations.
- app.models.user_models: For database model definitions.

Author: @kcaparas1630
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from dotenv import load_dotenv
import os
from loguru import logger
from app.models.user_models import Base
load_dotenv()


def build_database_url() -> str:
    """Resolve the database URL from the environment.

    DATABASE_URL wins when set. Otherwise the PostgreSQL URL is assembled from
    the individual DB_* variables, all of which are then required.

    Raises:
        ValueError: If neither DATABASE_URL nor the full DB_* set is present
    """
    url = os.getenv("DATABASE_URL")
    if url:
        return url

    # Load database connection details from environment variables
    required_vars = {
        "DB_USER": os.getenv("DB_USER"),
        "DB_PASSWORD": os.getenv("DB_PASSWORD"),
        "DB_HOST": os.getenv("DB_HOST"),
        "DB_PORT": os.getenv("DB_PORT"),
        "DB_NAME": os.getenv("DB_NAME")
    }
    missing_vars = [var for var, value in required_vars.items() if not value]
    if missing_vars:
        raise ValueError(f"Missing required environment variables: {', '.join(missing_vars)}")

    return (
        f"postgresql+psycopg2://{required_vars['DB_USER']}:{required_vars['DB_PASSWORD']}"
        f"@{required_vars['DB_HOST']}:{required_vars['DB_PORT']}/{required_vars['DB_NAME']}?sslmode=require"
    )


DATABASE_URL = build_database_url()

if DATABASE_URL.startswith("sqlite"):
    # In-memory SQLite must share one connection across threads
    engine = create_engine(
        DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
else:
    # Create a new SQLAlchemy engine instance
    engine = create_engine(
        DATABASE_URL,
        echo=False, # Log SQL queries for debugging
        pool_pre_ping=True, # verify connections before using
        pool_recycle=300 # Recycle connections every 5 minutes
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_tables():
    """Create all database tables defined in the models.

    Uses SQLAlchemy's metadata to create all tables that don't already exist.
    This is typically called during application startup.

    Raises:
        Exception: If table creation fails

    Note:
        This operation is idempotent - existing tables won't be modified
    """
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Error creating database table: {e}")
        raise

def drop_tables():
    """Drop all database tables defined in the models.

    WARNING: This will permanently delete all data in the tables.
    Use only in development/testing environments.

    Raises:
        Exception: If table deletion fails
    """
    try:
        Base.metadata.drop_all(bind=engine)
        logger.info("Database tables dropped successfully")
    except Exception as e:
        logger.error(f"Error dropping database tables: {e}")
        raise
