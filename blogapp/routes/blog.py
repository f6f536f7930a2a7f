"""
Blog API Endpoints
Generation triggers, job polling and post management under /api/blog
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from autoblog.exceptions import ArticleNotFoundError, DuplicateArticleError
from blogapp.models import ARTICLE_STATUSES
from blogapp.scheduler import BLOG_GENERATION_JOB

logger = logging.getLogger(__name__)

blog_api = Blueprint('blog_api', __name__, url_prefix='/api/blog')

GENERATION_FIELDS = ('category', 'subcategory', 'keywords', 'min_words', 'max_words', 'tone', 'auto_publish')


def safe_int(value, default=0, min_val=None, max_val=None):
    """Safely convert a value to integer with bounds checking."""
    try:
        result = int(value) if value not in (None, '') else default
        if min_val is not None:
            result = max(min_val, result)
        if max_val is not None:
            result = min(max_val, result)
        return result
    except (ValueError, TypeError):
        return default


def _generation_options(data: dict) -> dict:
    options = {key: data[key] for key in GENERATION_FIELDS if key in data}
    for key in ('min_words', 'max_words'):
        if key in options:
            options[key] = safe_int(options[key], default=1, min_val=1)
    return options


@blog_api.route('/generate', methods=['POST'])
def generate_post():
    """Generate one post synchronously."""
    data = request.get_json(silent=True) or {}
    result = current_app.gen_service.generate_and_publish_post(_generation_options(data))
    return jsonify(result), 201 if result.get('success') else 500


@blog_api.route('/generate-batch', methods=['POST'])
def generate_batch():
    """Start a background batch job and return its id."""
    data = request.get_json(silent=True) or {}
    max_batch = current_app.config['MAX_BATCH_SIZE']

    count = safe_int(data.get('count'), default=3)
    if count < 1:
        return jsonify({'error': 'count must be at least 1'}), 400
    if count > max_batch:
        return jsonify({'error': f'Maximum batch size is {max_batch}'}), 400

    try:
        job_id = current_app.gen_service.start_batch_job(count, _generation_options(data))
    except Exception as e:
        logger.error(f"Error starting batch job: {e}", exc_info=True)
        return jsonify({'error': str(e)}), 500

    return jsonify({
        'success': True,
        'job_id': job_id,
        'message': f'Started generating {count} posts',
    }), 202


@blog_api.route('/run-scheduler', methods=['POST'])
def run_scheduler():
    """Trigger the scheduled generation job now, without waiting for it."""
    result = current_app.blog_scheduler.run_job_now(BLOG_GENERATION_JOB)
    return jsonify(result), 202 if result.get('success') else 500


@blog_api.route('/jobs/<job_id>')
def job_status(job_id):
    status = current_app.gen_service.get_job_status(job_id)
    if not status:
        return jsonify({'error': 'Job not found'}), 404
    return jsonify(status)


@blog_api.route('/posts/<int:post_id>')
def get_post(post_id):
    try:
        post = current_app.publisher.get_post_by_id(post_id)
    except ArticleNotFoundError as e:
        return jsonify({'error': str(e)}), 404
    return jsonify(post.to_dict())


@blog_api.route('/posts/slug/<slug>')
def get_post_by_slug(slug):
    try:
        post = current_app.publisher.get_post_by_slug(slug)
    except ArticleNotFoundError as e:
        return jsonify({'error': str(e)}), 404
    return jsonify(post.to_dict())


@blog_api.route('/posts/slugs')
def list_slugs():
    return jsonify(current_app.publisher.list_slugs())


@blog_api.route('/posts/categories')
def list_categories():
    return jsonify(current_app.publisher.get_categories())


@blog_api.route('/posts/<int:post_id>/status', methods=['PATCH'])
def update_post_status(post_id):
    data = request.get_json(silent=True) or {}
    status = data.get('status')
    if status not in ARTICLE_STATUSES:
        return jsonify({'error': 'Invalid status value'}), 400

    try:
        post = current_app.publisher.update_post_status(post_id, status)
    except ArticleNotFoundError as e:
        return jsonify({'error': str(e)}), 404
    return jsonify(post.to_dict(include_content=False))


@blog_api.route('/generate-slug', methods=['PATCH'])
def backfill_slugs():
    try:
        updated = current_app.publisher.backfill_slugs()
    except DuplicateArticleError as e:
        return jsonify({'error': str(e)}), 409
    return jsonify({
        'success': True,
        'updated': len(updated),
        'posts': [post.to_dict(include_content=False) for post in updated],
    })


@blog_api.route('/posts/publish-all', methods=['PATCH'])
def publish_all():
    count = current_app.publisher.publish_all_drafts()
    return jsonify({
        'success': True,
        'published': count,
        'message': f'Published {count} posts',
    })
