import uvicorn

from .config import get_settings
from .logging_config import build_logging_config


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "payment_gateway.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_config=build_logging_config(settings.log_level.upper()),
    )


if __name__ == "__main__":
    main()
