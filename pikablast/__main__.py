"""Run the Pika-Blast server with uvicorn."""

import uvicorn

from pikablast.config import HOST, PORT


def main() -> None:
    uvicorn.run("pikablast.main:app", host=HOST, port=PORT)


if __name__ == "__main__":
    main()
