"""CLI for business-rule questions.

Interface layer is thin: parse args, call the use case, format output.
Errors are printed as ``[ERROR] <Type>: <message>`` and exit with code 2.
"""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence

from alerta_rag.application.dto.query_dto import RetrievalResponse
from alerta_rag.config.composition import build_query_use_case
from alerta_rag.config.log_setup import configure_logging
from alerta_rag.config.settings import AppSettings
from alerta_rag.domain.errors import DomainError
from alerta_rag.domain.models import ExplainFocus
from alerta_rag.interface.request_mapping import build_request, response_to_dict

EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="alerta-rag", description="Ask questions about business rules."
    )
    parser.add_argument("--question", "-q", required=True)
    parser.add_argument(
        "--focus",
        default=ExplainFocus.BUSINESS.value,
        choices=[f.value for f in ExplainFocus],
        type=str.upper,
    )
    parser.add_argument("--max-sources", type=int, default=5, help="Rules to return (1-10)")
    parser.add_argument("--project-id", default=None, help="Restrict to a project's rules")
    parser.add_argument("--json", action="store_true", help="Print the raw response as JSON")
    return parser


def print_response(resp: RetrievalResponse) -> None:
    print("\n" + "=" * 80)
    print(f"ANSWER (confidence={resp.confidence.value}, fallback={resp.used_fallback}):")
    print("=" * 80)
    print(resp.answer)

    if resp.project_scope.scoped:
        print(f"\nProject: {resp.project_scope.project_name} ({resp.project_scope.project_id})")

    print("\n" + "=" * 80)
    print("SOURCES:")
    print("=" * 80)
    for src, score in zip(resp.sources, resp.rule_scores):
        print(
            f"[{score.final_rank_position}] {src.title} ({src.domain.value}, "
            f"{src.criticality.value}) match={score.match_type.value} "
            f"semantic={score.semantic_score:.3f} keyword={score.keyword_score}"
        )

    if resp.ownerships:
        print("\nOwners:")
        for own in resp.ownerships:
            print(f"  {own.rule_name}: {own.owner} ({own.team}) <{own.contact}>")

    if resp.related_impacts:
        print("\nImpacts:")
        for line in resp.related_impacts:
            print(f"  - {line}")

    print(f"\n{resp.disclaimer}")


def print_error(err: BaseException) -> None:
    print(f"\n[ERROR] {type(err).__name__}: {err}")


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = AppSettings()
    configure_logging(settings.log_level)

    try:
        req = build_request(args.question, args.focus, args.max_sources, args.project_id)
        uc = build_query_use_case(settings)
    except DomainError as err:
        print_error(err)
        return EXIT_ERROR

    result = uc.execute(req)

    if result.ok and result.value is not None:
        if args.json:
            print(json.dumps(response_to_dict(result.value), ensure_ascii=False, indent=2))
        else:
            print_response(result.value)
        return 0

    print_error(result.error if result.error is not None else DomainError("unknown error"))
    return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
