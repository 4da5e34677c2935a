"""
Course Planner API - v1.0.0
"""

import os
import logging

import requests
from flask import Flask, Blueprint, current_app, request, jsonify
from werkzeug.exceptions import MethodNotAllowed

from config import get_config, validate_config, DeepSeekSettings
from course_core import CourseDataError, ConfigurationError
from course_parser import EnrollmentSimulator
from course_planner import CoursePlanner
from data_adapter import create_repository
from deepseek_client import DeepSeekClient
from recommendation_strategies import SemanticRecommender
from requirements_catalog import load_catalog

# --- VERSION ---
VERSION = "1.0.0"

# --- LOGGING SETUP ---
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

api = Blueprint('api', __name__)


def create_app(config=None):
    config = config or get_config()
    logging.getLogger().setLevel(config.LOG_LEVEL)

    for issue in validate_config(config):
        logger.warning(issue)

    app = Flask(__name__)
    app.config.from_object(config)
    app.secret_key = config.SECRET_KEY

    client = DeepSeekClient(DeepSeekSettings.from_config(config))
    planner = CoursePlanner(
        repository=create_repository(
            config.COURSE_DATA_PATH,
            default_credits=config.DEFAULT_CREDITS,
            default_capacity=config.DEFAULT_CAPACITY,
        ),
        catalog=load_catalog(config.REQUIREMENTS_PATH),
        semantic_recommender=SemanticRecommender(
            client,
            max_candidates=config.MAX_SEMANTIC_CANDIDATES,
            top_n=config.MAX_RECOMMENDATIONS,
        ),
        max_recommendations=config.MAX_RECOMMENDATIONS,
    )
    app.extensions['deepseek_client'] = client
    app.extensions['course_planner'] = planner

    app.register_blueprint(api)
    return app


def _planner() -> CoursePlanner:
    return current_app.extensions['course_planner']


def _json_body() -> dict:
    """The request's JSON object; an absent or unparseable body counts as empty."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    return data


@api.errorhandler(CourseDataError)
def handle_course_data_error(e):
    return jsonify({'error': str(e)}), 400


@api.errorhandler(ValueError)
def handle_value_error(e):
    return jsonify({'error': str(e)}), 400


# --- RELAY ---

RELAY_PATH = '/api/deepseek/v1/chat/completions'


@api.app_errorhandler(MethodNotAllowed)
def handle_method_not_allowed(e):
    # routing rejects every non-POST relay method before the view runs
    if request.path != RELAY_PATH:
        return e
    return jsonify({'error': f"Method {request.method} Not Allowed"}), 405, {'Allow': 'POST'}


@api.route(RELAY_PATH, methods=['POST'], provide_automatic_options=False)
def deepseek_relay():
    """Forwards a chat-completion request upstream with the server-held API key."""
    client: DeepSeekClient = current_app.extensions['deepseek_client']
    try:
        upstream = client.forward(request.get_data())
    except ConfigurationError:
        logger.error("DEEPSEEK_API_KEY environment variable not set.")
        return jsonify({'error': 'Server configuration error: API key missing.'}), 500
    except requests.RequestException as e:
        logger.error(f"Error in proxy function: {e}")
        return jsonify({'error': 'Internal Server Error proxying request.', 'details': str(e)}), 500

    if not upstream.ok:
        logger.error(f"DeepSeek API Error ({upstream.status_code}): {upstream.text[:500]}")
        content_type = upstream.headers.get('Content-Type', 'text/plain')
        return upstream.text, upstream.status_code, {'Content-Type': content_type}

    try:
        return jsonify(upstream.json()), 200
    except ValueError as e:
        logger.error(f"DeepSeek returned a non-JSON success body: {e}")
        return jsonify({'error': 'Internal Server Error proxying request.', 'details': str(e)}), 500


# --- COURSE DATA ---

@api.route('/api/courses/upload', methods=['POST'])
def upload_courses():
    upload = request.files.get('file')
    if upload is not None:
        if not upload.filename.lower().endswith('.csv'):
            raise CourseDataError("Please upload a CSV file")
        text = upload.read().decode('utf-8-sig', errors='replace')
    elif request.is_json:
        text = _json_body().get('csv', '')
        if not isinstance(text, str):
            raise ValueError("'csv' must be a string")
    else:
        text = request.get_data(as_text=True)

    enrollment = None
    if request.args.get('simulate', '').lower() in ('1', 'true', 'yes'):
        seed = request.args.get('seed', type=int)
        enrollment = EnrollmentSimulator(seed=seed)

    courses, message = _planner().load_courses(text, enrollment=enrollment)
    return jsonify({
        'message': message,
        'count': len(courses),
        'departments': _planner().repository.get_departments(),
    })


@api.route('/api/courses', methods=['GET'])
def list_courses():
    repo = _planner().repository
    department = request.args.get('department')
    query = request.args.get('q')
    if department:
        courses = repo.get_department_courses(department)
    elif query:
        courses = repo.search_courses(query)
    else:
        courses = repo.courses
    return jsonify({'courses': [c.to_dict() for c in courses]})


@api.route('/api/departments', methods=['GET'])
def list_departments():
    return jsonify({'departments': _planner().repository.get_departments()})


# --- REQUIREMENTS ---

@api.route('/api/completed', methods=['POST'])
def set_completed_courses():
    completed = _json_body().get('completed', '')
    if not isinstance(completed, (str, list)):
        raise ValueError("'completed' must be a comma-separated string or a list of course ids")
    _planner().set_completed(completed)
    return jsonify({
        'completed': sorted(_planner().completed),
        'requirements': _planner().requirements_view(),
    })


@api.route('/api/requirements', methods=['GET'])
def requirements_analysis():
    view = _planner().requirements_view()
    if view is None:
        return jsonify({'requirements': None, 'message': 'Select completed courses to see your progress'})
    return jsonify({'requirements': view})


# --- PLAN ---

@api.route('/api/plan', methods=['GET'])
def get_plan():
    return jsonify({'planned': [c.to_dict() for c in _planner().planned]})


@api.route('/api/plan', methods=['POST'])
def add_to_plan():
    """
    Adds sections to the plan. Accepts `unique_key` / `unique_keys` (one entry
    per section), or `course_id` / `course_ids`, which resolve to the first
    section of each course.
    """
    data = _json_body()
    keys = None
    for many, one in (('unique_keys', 'unique_key'), ('course_ids', 'course_id')):
        if data.get(many) is not None:
            keys = data[many]
            if not isinstance(keys, list):
                raise ValueError(f"'{many}' must be a list")
        elif data.get(one):
            keys = [data[one]]
        if keys:
            break
    if not keys:
        raise ValueError("Provide 'unique_key', 'unique_keys', 'course_id' or 'course_ids'")
    if not all(isinstance(key, str) for key in keys):
        raise ValueError("Plan entries must be strings")

    results = []
    for key in keys:
        added, message = _planner().add_to_plan(key)
        results.append({'unique_key': key, 'added': added, 'message': message})
    return jsonify({'results': results, 'planned': [c.to_dict() for c in _planner().planned]})


@api.route('/api/plan/<path:unique_key>', methods=['DELETE'])
def remove_from_plan(unique_key):
    removed, message = _planner().remove_from_plan(unique_key)
    status = 200 if removed else 404
    return jsonify({'removed': removed, 'message': message}), status


# --- RECOMMENDATIONS ---

@api.route('/api/recommendations', methods=['POST'])
def recommendations():
    data = _json_body()
    recs, message = _planner().recommend(
        data.get('interests', ''),
        mode=data.get('mode', 'keyword'),
        match_fields=data.get('match_fields', 'title_department'),
    )
    return jsonify({
        'recommendations': [r.to_dict() for r in recs],
        'message': message,
    })


@api.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    planner = _planner()
    return jsonify({
        'status': 'healthy',
        'version': VERSION,
        'ai_enabled': bool(current_app.config.get('DEEPSEEK_API_KEY')),
        'courses_loaded': len(planner.repository.courses),
    })


app = create_app()

if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5000))
    app.run(host='0.0.0.0', port=port, debug=app.config.get('DEBUG', False))
