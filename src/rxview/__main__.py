"""Run the HTTP server: ``python -m rxview``."""

from rxview.ext.http import serve_http
from rxview.foundation.config import get_settings
from rxview.runtime.observability import configure_logging


def main() -> None:
    settings = get_settings()
    configure_logging(settings.logging.format, settings.logging.level)
    serve_http(settings)


if __name__ == "__main__":
    main()
