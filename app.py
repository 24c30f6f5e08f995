# app.py
"""
Thin entrypoint for the API.

Usage example:
    uvicorn app:app --reload
    python app.py            # honours HOST / PORT
"""

import uvicorn

from exercise_tracker.main import app  # re-export FastAPI instance


if __name__ == "__main__":
    settings = app.state.settings
    uvicorn.run(app, host=settings.host, port=settings.port)
