"""Test configuration."""
import os
from pathlib import Path
from typing import Generator

import pytest
from dotenv import load_dotenv
from sqlalchemy.orm import Session

# Set test environment before any imports
os.environ["ENV"] = "test"
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

# Load test environment variables
test_env_path = Path(__file__).parents[3] / ".env.test"
load_dotenv(test_env_path)

# Import after environment setup
from wordreview.models.base import SessionLocal, reset_db


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    reset_db()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
