"""
rest_auth package

Core backend of the REST authentication service:

- FastAPI application factory (`main.py`)
- SQLAlchemy models and database integration (`models.py`, `db.py`)
- Password hashing and JWT codec (`auth.py`)
- Account service and request guards (`service.py`, `deps.py`)
- Pydantic schemas and settings (`schemas.py`, `config.py`)
"""
