"""
FastAPI Application - Nutrition Service
Entry point for uvicorn: `uvicorn main:app`
"""

# Load environment variables from .env file FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

from nutrition_service.core.config import config
from nutrition_service.core.logger import logger
from nutrition_service.main import create_app

app = create_app()


if __name__ == "__main__":
    import uvicorn

    logger.info(
        f"Starting {config.service_name} on port {config.port}",
        metadata={
            "service_name": config.service_name,
            "version": config.service_version,
            "environment": config.environment,
            "port": config.port,
        },
    )

    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.is_development,
    )
