"""Flask routes for the scoring API."""

import io

from flask import jsonify, request, send_file

from .api.services import ScoreFeedback
from .domain.geometry import StrokePath
from .flask_app import (
    app, error_response, get_scorer, parse_strokes, validate_target_param,
)
from .scoring.scorer import render_target_buffer
from .utils.rendering import buffer_to_png


@app.route('/api/health')
def api_health():
    return jsonify(status='ok')


@app.route('/api/score', methods=['POST'])
def api_score():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return error_response("Expected a JSON object")
    target = data.get('target')
    ok, err = validate_target_param(target)
    if not ok:
        return err
    strokes, err = parse_strokes(data)
    if err:
        return err

    result = get_scorer().evaluate(StrokePath.from_strokes(strokes), target)
    feedback = ScoreFeedback.from_result(result)
    body = result.to_dict()
    body['reward'] = feedback.to_dict()
    return jsonify(body)


@app.route('/api/target')
def api_target():
    """PNG of the target glyph buffer, as the scorer sees it."""
    t = request.args.get('t')
    ok, err = validate_target_param(t)
    if not ok:
        return err
    if not t:
        return error_response("Target must not be empty")
    scorer = get_scorer()
    buffer, font_size = render_target_buffer(scorer.backend, t, scorer.config)
    response = send_file(io.BytesIO(buffer_to_png(buffer)), mimetype='image/png')
    response.headers['X-Font-Size'] = str(font_size)
    return response
