"""
rest_auth test package

Tests for the REST authentication service:

- HTTP routes through FastAPI's TestClient (`test_accounts.py`, `test_health.py`)
- Account service and token codec (`test_service.py`)
- Database initialization (`test_db_init.py`)
- Logging helpers (`test_event_logger.py`)
"""
