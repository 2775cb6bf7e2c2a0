import uvicorn
from vidrelay.config.settings import config


def main() -> None:
    uvicorn.run(
        "vidrelay.main:app",
        host=config.api.host,
        port=config.api.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
