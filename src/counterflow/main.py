import uvicorn
from fasthtml.common import serve

from counterflow.adapters.fasthtml import create_app
from counterflow.app.configurator import configure_logging
from counterflow.config import get_config

config = get_config()
configure_logging(config.logging)

app = create_app(config)


def run():
    """Console entry point: serve the counter page."""
    uvicorn.run("counterflow.main:app", host=config.web.host, port=config.web.port, reload=config.web.auto_reload)


if __name__ == "__main__":
    serve(appname="counterflow.main", host=config.web.host, port=config.web.port, reload=config.web.auto_reload)
