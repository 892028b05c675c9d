from typing import Optional

from flask import Flask
from flask_cors import CORS

from reststoprouting.config import Config
from reststoprouting.logger import logger
from routing import CONFIG_KEY, routing_bp


def create_app(config: Optional[Config] = None) -> Flask:
    """Create the Flask app with the routing blueprint registered"""
    config = config or Config()
    config.validate()
    logger.logger.setLevel(config.log_level.upper())
    if config.log_file:
        logger.add_file_handler(config.log_file)

    app = Flask(__name__)
    CORS(app)
    app.config[CONFIG_KEY] = config
    app.register_blueprint(routing_bp)

    logger.info(f"RestStop routing initialized with path backends: {', '.join(config.path_backends)}")
    return app


if __name__ == '__main__':
    engine_config = Config()
    app = create_app(engine_config)
    api = engine_config.get_api_config()
    print(f"\n🚀 RestStop backend running at: http://{api['host']}:{api['port']}\n")
    app.run(**api)
