from app.db.session import SessionLocal

# FastAPI dependency that yields a database session per request.
async def get_session():
    # Closed on teardown; rollback of failed writes is the caller's job (see services).
    async with SessionLocal() as session:
        yield session
