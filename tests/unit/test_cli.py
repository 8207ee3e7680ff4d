"""Unit tests for the stroke-score command line."""

import json

import pytest
from PIL import Image

from fakes import L_PATH, ShapeBackend
from stroke_score import cli


@pytest.fixture(autouse=True)
def shape_backend_cli(monkeypatch, restore_logging):
    """Run the CLI against ShapeBackend instead of real fonts."""
    monkeypatch.setattr(cli, 'PilRasterBackend',
                        lambda font_path=None, supersample=4: ShapeBackend())


def write_json(tmp_path, name, data):
    path = tmp_path / name
    path.write_text(json.dumps(data))
    return str(path)


def test_score_points_file(tmp_path, capsys):
    path = write_json(tmp_path, 'l.json', L_PATH)
    assert cli.main(['--target', 'L', '--path', path]) == 0
    assert capsys.readouterr().out.strip() == 'L: 100 (Excellent!)'


def test_target_from_file_and_json_output(tmp_path, capsys):
    path = write_json(tmp_path, 'l.json', {'target': 'L', 'strokes': [L_PATH]})
    assert cli.main(['--path', path, '--json']) == 0
    out = json.loads(capsys.readouterr().out)
    assert out['target'] == 'L'
    assert out['score'] == 100
    assert out['reward']['is_reward'] is True


def test_nested_strokes_list(tmp_path, capsys):
    path = write_json(tmp_path, 's.json', [[[0, 0], [0, 100]], [[0, 100], [100, 100]]])
    assert cli.main(['-t', 'L', '-p', path, '--json']) == 0
    assert json.loads(capsys.readouterr().out)['score'] == 100


def test_preview_written(tmp_path):
    path = write_json(tmp_path, 'l.json', L_PATH)
    preview = tmp_path / 'preview.png'
    assert cli.main(['-t', 'L', '-p', path, '--preview', str(preview)]) == 0
    with Image.open(preview) as img:
        assert img.size == (200, 200)


def test_missing_target_is_an_error(tmp_path, capsys):
    path = write_json(tmp_path, 'l.json', L_PATH)
    assert cli.main(['--path', path]) == 2
    assert 'no target' in capsys.readouterr().err


def test_malformed_points_are_an_error(tmp_path, capsys):
    path = write_json(tmp_path, 'bad.json', {'points': [[1]]})
    assert cli.main(['-t', 'L', '-p', path]) == 2
    assert 'error' in capsys.readouterr().err


def test_integer_beyond_float_range_is_an_error(tmp_path, capsys):
    path = write_json(tmp_path, 'big.json', {'points': [[10 ** 400, 1], [0, 0]]})
    assert cli.main(['-t', 'L', '-p', path]) == 2
    assert 'malformed point data' in capsys.readouterr().err


def test_integer_beyond_float_range_in_batch_names_line(tmp_path, capsys):
    batch = tmp_path / 'big.jsonl'
    batch.write_text(json.dumps({'target': 'L', 'points': [[10 ** 400, 1]]}) + '\n')
    assert cli.main(['--batch', str(batch)]) == 2
    assert 'big.jsonl:1' in capsys.readouterr().err


def test_invalid_json_is_an_error(tmp_path):
    path = tmp_path / 'broken.json'
    path.write_text('{not json')
    assert cli.main(['-t', 'L', '-p', str(path)]) == 2


def test_missing_file_is_an_error(tmp_path):
    assert cli.main(['-t', 'L', '-p', str(tmp_path / 'nope.json')]) == 2


def test_config_override(tmp_path, capsys):
    path = write_json(tmp_path, 'v.json', [[0, 0], [0, 100]])
    strict = write_json(tmp_path, 'cfg.json', {'score_multiplier': 1})
    assert cli.main(['-t', '口', '-p', path, '-c', strict, '--json']) == 0
    assert json.loads(capsys.readouterr().out)['score'] == 0


def test_bad_config_key(tmp_path):
    path = write_json(tmp_path, 'l.json', L_PATH)
    cfg = write_json(tmp_path, 'cfg.json', {'nope': 1})
    assert cli.main(['-t', 'L', '-p', path, '-c', cfg]) == 2


def test_batch_summary(tmp_path, capsys):
    batch = tmp_path / 'attempts.jsonl'
    batch.write_text('\n'.join([
        json.dumps({'id': 'a', 'target': 'L', 'points': L_PATH}),
        '',
        json.dumps({'id': 'b', 'target': 'L', 'points': [[5, 5]]}),
    ]))
    assert cli.main(['--batch', str(batch)]) == 0
    out = capsys.readouterr().out
    assert 'Scored 2 attempts: mean 50.0, 1 at or above reward threshold' in out


def test_batch_json_lines(tmp_path, capsys):
    batch = tmp_path / 'attempts.jsonl'
    batch.write_text(json.dumps({'id': 'a', 'target': 'L', 'points': L_PATH}) + '\n')
    assert cli.main(['--batch', str(batch), '--json']) == 0
    line = json.loads(capsys.readouterr().out.strip())
    assert line['id'] == 'a'
    assert line['score'] == 100


def test_batch_bad_line_reports_line_number(tmp_path, capsys):
    batch = tmp_path / 'attempts.jsonl'
    batch.write_text(json.dumps({'target': 'L', 'points': L_PATH}) + '\n{oops\n')
    assert cli.main(['--batch', str(batch)]) == 2
    assert 'attempts.jsonl:2' in capsys.readouterr().err


def test_path_from_json_rejects_other_types():
    with pytest.raises(ValueError):
        cli.path_from_json('L')
    with pytest.raises(ValueError):
        cli.path_from_json({'target': 'L'})
