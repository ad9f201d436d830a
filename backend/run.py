"""
Entry point for the Vibration Test Planner backend.
"""
import uvicorn
from vibration_wizard.config import get_settings


def main():
    """Run the FastAPI application."""
    settings = get_settings()
    uvicorn.run(
        "vibration_wizard.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="info"
    )


if __name__ == "__main__":
    main()
