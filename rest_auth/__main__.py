import uvicorn

from .config import Settings
from .main import create_app


def main() -> None:
    settings = Settings()
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT, reload=False)


if __name__ == "__main__":
    main()
