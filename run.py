import sys

from relay import create_app
from relay.config import ConfigError, RelaySettings, get_config
from relay.logging_config import configure_logging

if __name__ == "__main__":
    try:
        settings = RelaySettings.from_env()
    except ConfigError as e:
        configure_logging().error("Invalid configuration", error=str(e))
        sys.exit(1)

    app = create_app(settings)
    app.run(host="0.0.0.0", port=settings.port, debug=get_config().DEBUG)
