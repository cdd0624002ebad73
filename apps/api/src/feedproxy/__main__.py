import uvicorn

from feedproxy.config import HOST, PORT


def main() -> None:
    uvicorn.run("feedproxy.main:app", host=HOST, port=PORT, log_config=None)


if __name__ == "__main__":
    main()
