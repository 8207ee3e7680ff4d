#!/usr/bin/env python3
"""Command-line interface for handwriting scoring.

Scores a recorded pen path against a target glyph, or a whole batch of
attempts from a JSON Lines file.

Path files hold JSON in one of these shapes:
    [[x, y], ...]                      one continuous polyline
    [[[x, y], ...], ...]               one polyline per pen-down
    {"points": [...]} / {"strokes": [...]}, optionally with "target"

Batch files hold one object per line with "target" and "points" or
"strokes", plus an optional "id".

Usage:
    stroke-score --target 永 --path attempt.json
    stroke-score --target 永 --path attempt.json --json --preview overlay.png
    stroke-score --batch attempts.jsonl --font /path/to/NotoSansCJK.ttc

Or run via the module:
    python -m stroke_score.cli --target 一 --path line.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from tqdm import tqdm

from .api.services import ScoreFeedback
from .config import ScoringConfig
from .domain.geometry import StrokePath
from .flask_app import configure_logging
from .scoring.scorer import StrokeScorer
from .utils.rendering import PilRasterBackend, compose_preview

logger = logging.getLogger(__name__)


def _create_argument_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        description='Score a handwritten path against a target glyph'
    )
    parser.add_argument('--target', '-t', type=str, default=None,
                        help='Target glyph string (overrides "target" in the path file)')
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument('--path', '-p', type=str,
                        help='JSON file with the pen path')
    source.add_argument('--batch', '-b', type=str,
                        help='JSON Lines file with one attempt per line')
    parser.add_argument('--font', '-f', type=str, default=None,
                        help='Font file used to render the target glyph')
    parser.add_argument('--config', '-c', type=str, default=None,
                        help='JSON file overriding scoring parameters')
    parser.add_argument('--json', action='store_true',
                        help='Print the full result as JSON')
    parser.add_argument('--preview', type=str, default=None,
                        help='Write a PNG overlay of user and target buffers')
    parser.add_argument('--log-level', type=str, default='WARNING',
                        help='Log level (default: WARNING)')
    return parser


def path_from_json(data) -> StrokePath:
    """Build a StrokePath from any of the accepted JSON shapes.

    Raises:
        ValueError: If the data is not a recognized path shape.
    """
    try:
        if isinstance(data, dict):
            if 'strokes' in data:
                return StrokePath.from_strokes(data['strokes'])
            if 'points' in data:
                return StrokePath.from_points(data['points'])
            raise ValueError("expected a 'points' or 'strokes' key")
        if isinstance(data, list):
            if data and isinstance(data[0], list) and data[0] and isinstance(data[0][0], list):
                return StrokePath.from_strokes(data)
            return StrokePath.from_points(data)
    except (TypeError, IndexError, KeyError, OverflowError) as e:
        raise ValueError(f"malformed point data: {e}") from e
    raise ValueError(f"unsupported path data of type {type(data).__name__}")


def _load_config(config_path: str | None) -> ScoringConfig:
    if not config_path:
        return ScoringConfig()
    return ScoringConfig.from_dict(json.loads(Path(config_path).read_text()))


def _score_single(args, scorer: StrokeScorer) -> int:
    data = json.loads(Path(args.path).read_text())
    target = args.target
    if target is None and isinstance(data, dict):
        target = data.get('target')
    if target is None:
        raise ValueError("no target given (use --target or a 'target' key)")
    if not isinstance(target, str):
        raise ValueError("target must be a string")

    path = path_from_json(data)
    result = scorer.evaluate(path, target)
    feedback = ScoreFeedback.from_result(result)

    if args.preview:
        user_buf, target_buf = scorer.render_buffers(path, target)
        compose_preview(user_buf, target_buf).save(args.preview)
        logger.info("Preview written to %s", args.preview)

    if args.json:
        out = result.to_dict()
        out['target'] = target
        out['reward'] = feedback.to_dict()
        print(json.dumps(out, ensure_ascii=False))
    else:
        print(f"{target}: {result.score} ({feedback.message})")
    return 0


def _score_batch(args, scorer: StrokeScorer) -> int:
    lines = [ln for ln in Path(args.batch).read_text().splitlines() if ln.strip()]
    scores = []
    rewards = 0
    for lineno, line in enumerate(tqdm(lines, desc='Scoring', unit='attempt',
                                       disable=args.json), start=1):
        try:
            data = json.loads(line)
            record = data if isinstance(data, dict) else {}
            target = args.target if args.target is not None else record.get('target', '')
            if not isinstance(target, str):
                raise ValueError("target must be a string")
            result = scorer.evaluate(path_from_json(data), target)
        except ValueError as e:
            raise ValueError(f"{args.batch}:{lineno}: {e}") from e

        feedback = ScoreFeedback.from_result(result)
        scores.append(result.score)
        rewards += feedback.is_reward
        if args.json:
            out = result.to_dict()
            out['id'] = record.get('id', lineno)
            out['target'] = target
            print(json.dumps(out, ensure_ascii=False))

    if not args.json:
        mean = sum(scores) / len(scores) if scores else 0.0
        print(f"Scored {len(scores)} attempts: mean {mean:.1f}, "
              f"{rewards} at or above reward threshold")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the CLI.

    Returns:
        Process exit status: 0 on success, 2 on bad input files.
    """
    parser = _create_argument_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        config = _load_config(args.config)
        backend = PilRasterBackend(args.font, supersample=config.supersample)
        scorer = StrokeScorer(config, backend)
        if args.batch:
            return _score_batch(args, scorer)
        return _score_single(args, scorer)
    except (OSError, ValueError, OverflowError) as e:
        # json.JSONDecodeError is a ValueError
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == '__main__':
    sys.exit(main())
