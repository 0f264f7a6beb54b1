#!/usr/bin/env python3
"""
Writing Assessment Command Line
===============================
Usage:
    python -m writing_assessment tasks [--category report]
    python -m writing_assessment evaluate essay.txt --task t1_letter_apology
        [--offline] [--dictionary words.txt] [--language en-GB] [--json]
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .aggregator import evaluate_submission
from .config_logging import ConfigurationError, WritingAssessmentError, get_config
from .lexicon import load_word_list
from .models import EvalResult
from .proofing import ProofingClient
from .tasks import get_catalog


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='writing_assessment',
        description='Assess formal English writing against a task'
    )
    sub = parser.add_subparsers(dest='command')

    tasks = sub.add_parser('tasks', help='List the task catalog')
    tasks.add_argument('--category', help='Only tasks of this category')

    evaluate = sub.add_parser('evaluate', help='Evaluate a text file')
    evaluate.add_argument('file', help="Text file to evaluate ('-' for stdin)")
    evaluate.add_argument('--task', required=True, help='Task id from the catalog')
    evaluate.add_argument('--offline', action='store_true',
                          help='Skip the proofing service and run grammar heuristics')
    evaluate.add_argument('--dictionary', type=str, help='Word list for unknown-word checks')
    evaluate.add_argument('--language', type=str, help='Proofing language (e.g., en-GB)')
    evaluate.add_argument('--json', action='store_true', help='Print the full JSON report')
    return parser


def _read_text(path: str) -> str:
    if path == '-':
        return sys.stdin.read()
    return Path(path).read_text(encoding='utf-8')


def format_report(result: EvalResult) -> str:
    """Plain-text summary of an evaluation."""
    lines = []
    s = result.scores
    lines.append(f"Total: {result.total}/40")
    lines.append(f"  Language {s.language}/10 | Form {s.form}/10 | "
                 f"Organisation {s.organisation}/10 | Effect {s.effect}/10")
    f = result.facts
    lines.append(f"Words {f.words}, paragraphs {f.paragraphs}, linking words {f.linking_words}, "
                 f"contractions {f.contractions}, TTR {f.type_token_ratio:.2f}, "
                 f"formality cues {f.formality_cues}")

    lines.append("Task points:")
    for point in result.coverage:
        mark = 'x' if point.covered else ' '
        lines.append(f"  [{mark}] {point.text}")

    if result.advice:
        lines.append("Advice:")
        for item in result.advice:
            lines.append(f"  - {item}")

    if result.spelling.issues:
        lines.append("Spelling:")
        for issue in result.spelling.issues:
            lines.append(f"  {issue.word} -> {issue.suggestion} (x{issue.count})")

    if result.unknown_words.issues:
        words = ', '.join(i.word for i in result.unknown_words.issues)
        lines.append(f"Unknown words: {words}")

    if result.grammar and result.grammar.issues:
        lines.append("Grammar:")
        for issue in result.grammar.issues:
            example = f" e.g. \"{issue.example}\"" if issue.example else ""
            lines.append(f"  {issue.message} (x{issue.count}){example}")

    if result.proof.degraded:
        lines.append(f"Proofing unavailable: {result.proof.error}")
    elif result.proof.counts.total:
        c = result.proof.counts
        lines.append(f"Proofing: {c.spelling} spelling, {c.grammar} grammar, "
                     f"{c.style} style, {c.other} other")
        for issue in result.proof.issues:
            hint = f" -> {issue.suggestion}" if issue.suggestion else ""
            lines.append(f"  [{issue.type}] {issue.message}{hint}")

    return '\n'.join(lines)


def _cmd_tasks(args) -> int:
    catalog = get_catalog()
    tasks = catalog.by_category(args.category) if args.category else list(catalog)
    for task in tasks:
        print(f"{task.id:<22} {task.category:<7} {task.min_words:>4} words  {task.label}")
    return 0


def _cmd_evaluate(args) -> int:
    task = get_catalog().get(args.task)
    text = _read_text(args.file)

    dictionary_path = args.dictionary or get_config().dictionary_path
    dictionary = load_word_list(dictionary_path) if dictionary_path else None

    offline = args.offline or not get_config().proof_enabled
    proof_result = None
    if not offline:
        with ProofingClient(language=args.language) as client:
            proof_result = client.proof(text)

    result = evaluate_submission(
        text, task,
        dictionary=dictionary,
        proof=proof_result,
        include_grammar=offline or proof_result.degraded,
    )

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(format_report(result))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == 'tasks':
            return _cmd_tasks(args)
        if args.command == 'evaluate':
            return _cmd_evaluate(args)
    except ConfigurationError as e:
        print(f"Configuration error: {e.message}", file=sys.stderr)
        return 2
    except WritingAssessmentError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    parser.print_help()
    return 1


if __name__ == '__main__':
    sys.exit(main())
