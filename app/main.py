"""Repo-root Uvicorn entrypoint.

Run the API from the repository root with:

    uvicorn app.main:app --reload

The application itself lives in `backend/app/main.py`; this module only re-exports it.
"""

from backend.app.main import app  # noqa: F401
