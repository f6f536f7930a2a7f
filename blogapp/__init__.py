"""
Autoblog web application.
Flask app factory wiring the generation pipeline, publisher and scheduler.
"""

import logging
from typing import Optional

from flask import Flask, jsonify

from autoblog import __version__
from autoblog.config import Settings, get_settings
from blogapp.models import get_session_factory, init_db
from blogapp.routes import blog_api
from blogapp.scheduler import BlogScheduler
from blogapp.services import GenerationService, PublisherService, build_generation_service

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    session_factory=None,
    generation_service: Optional[GenerationService] = None,
    start_scheduler: bool = False,
) -> Flask:
    """
    Build the Flask application.

    Services hang off the app object (``app.gen_service``, ``app.publisher``,
    ``app.blog_scheduler``) so blueprints reach them through ``current_app``.
    """
    settings = settings or get_settings()

    app = Flask(__name__)
    app.secret_key = settings.flask_secret_key
    app.config['MAX_BATCH_SIZE'] = settings.max_batch_size

    # We pass the Session factory, not an instance, so services can manage their own threads/scopes
    if session_factory is None:
        engine = init_db(settings.database_path)
        session_factory = get_session_factory(engine)

    app.Session = session_factory
    app.gen_service = generation_service or build_generation_service(settings, session_factory)
    app.publisher = PublisherService(session_factory)
    app.blog_scheduler = BlogScheduler(app.gen_service, settings)

    app.register_blueprint(blog_api)

    @app.route('/health')
    def health():
        return jsonify({
            'status': 'ok',
            'version': __version__,
            'scheduler_running': app.blog_scheduler.running,
            'posts': {
                'draft': app.publisher.count_posts(status='draft'),
                'published': app.publisher.count_posts(status='published'),
            },
        })

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(500)
    def internal_error(error):
        logger.error(f"Internal server error: {error}")
        return jsonify({'error': 'Internal server error'}), 500

    if start_scheduler:
        app.blog_scheduler.start()

    return app
