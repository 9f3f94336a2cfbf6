import logging

import uvicorn

from lexid.config import HOST, LOG_LEVEL, PORT


def run() -> None:
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    logging.getLogger("lexid").info("Listening on %s:%s", HOST, PORT)
    uvicorn.run("lexid.main:app", host=HOST, port=PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
