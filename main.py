# Application entry point for `uvicorn main:app` from the repository root

from hrms.main import app  # noqa: F401
