from fastapi import HTTPException


def ok() -> dict:
    return {"status": "ok"}


def fail(status: int, message: str):
    """Raise; routes use it where they would otherwise return an error body."""
    raise HTTPException(status, message)
