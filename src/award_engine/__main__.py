"""Run the API with uvicorn: ``python -m award_engine``."""

import uvicorn

from award_engine.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "award_engine.api.app:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
