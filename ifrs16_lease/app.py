"""
IFRS 16 Lease Engine Application
Flask application factory exposing the lease calculator over JSON
"""

from flask import Flask, jsonify
from flask_cors import CORS
import os
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

# Import configuration
from ifrs16_lease.config import Config, config

# Import blueprints
from ifrs16_lease.calculate_backend import calc_bp


def setup_logging(log_dir: Optional[Path], level: int = logging.DEBUG):
    """Setup application logging - rotating file (when log_dir is given) and console"""
    log_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Repeated factory calls must not stack handlers
    for handler in root_logger.handlers[:]:
        if getattr(handler, '_ifrs16_lease', False):
            root_logger.removeHandler(handler)
            handler.close()

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)

        # File handler with rotation
        log_file = log_dir / 'ifrs16_lease.log'
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=Config.LOG_MAX_BYTES,
            backupCount=Config.LOG_BACKUP_COUNT
        )
        file_handler.setFormatter(log_formatter)
        file_handler.setLevel(logging.DEBUG)
        file_handler._ifrs16_lease = True
        root_logger.addHandler(file_handler)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(log_formatter)
    console_handler.setLevel(logging.INFO)
    console_handler._ifrs16_lease = True
    root_logger.addHandler(console_handler)

    return root_logger


def create_app(config_name=None):
    """Application factory pattern"""
    app = Flask(__name__)

    # Load configuration
    config_name = config_name or os.environ.get('FLASK_ENV', 'default')
    app.config.from_object(config.get(config_name, config['default']))

    # Setup logging
    log_dir = Path(app.config['LOG_DIR']) if app.config.get('LOG_TO_FILE') else None
    logger = setup_logging(log_dir)
    logger.info("🚀 Initializing IFRS 16 Lease Engine...")

    # Initialize CORS
    cors_origins = app.config.get('CORS_ORIGINS', ['*'])
    if isinstance(cors_origins, str):
        cors_origins = cors_origins.split(',')

    CORS(app,
         resources={r"/api/*": {"origins": cors_origins, "methods": ["GET", "POST", "OPTIONS"], "allow_headers": ["Content-Type"]}})

    # Register blueprints
    app.register_blueprint(calc_bp)
    logger.info("✅ Blueprints registered")

    @app.route('/api/health')
    def health():
        return jsonify({'status': 'ok'})

    logger.info("✅ Application created successfully")
    return app


if __name__ == '__main__':
    app = create_app()
    logger = logging.getLogger(__name__)

    logger.info("══════════════════════════════════════════════════════════════")
    logger.info("   📊 IFRS 16 Lease Engine - Starting Server")
    logger.info("══════════════════════════════════════════════════════════════")
    logger.info(f"📍 API Endpoint: http://{Config.API_HOST}:{Config.API_PORT}/api/")
    logger.info("   - /api/calculate_lease - Measure a lease")
    logger.info("   - /api/modify_lease - Remeasure a lease after a modification")
    logger.info(f"📝 Logs: {Config.LOG_DIR}/ifrs16_lease.log")
    logger.info("══════════════════════════════════════════════════════════════")

    app.run(
        debug=Config.DEBUG,
        host=Config.API_HOST,
        port=Config.API_PORT
    )
