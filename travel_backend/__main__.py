"""
Runs the API under uvicorn on HOST:PORT (defaults 0.0.0.0:8080).

    python -m travel_backend
"""
import uvicorn

from travel_backend.api.config import load_settings


def main():
    settings = load_settings()
    uvicorn.run("travel_backend.api.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
