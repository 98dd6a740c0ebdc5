"""Run the vault server: ``python -m vault_keeper``."""

import uvicorn

from .api.app import create_app
from .config import get_config
from .utils.logger import configure_logging


def main() -> None:
    config = get_config()
    logger = configure_logging(log_level=config.logging.level)
    app = create_app(config)

    server = config.server
    logger.info(
        "Starting server",
        extra={"host": server.host, "port": server.port, "tls": bool(server.tls_cert_file)},
    )
    uvicorn.run(
        app,
        host=server.host,
        port=server.port,
        ssl_certfile=server.tls_cert_file,
        ssl_keyfile=server.tls_key_file,
        log_level=config.logging.level.lower(),
    )


if __name__ == "__main__":
    main()
