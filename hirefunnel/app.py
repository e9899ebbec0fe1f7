import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .env import get_settings, load_env

from . import __version__
from .admin import AdminService, suggested_tags
from .errors import FunnelError, ValidationError
from .export import assessment_transcript, export_csv
from .importer import import_records, load_records
from .logger import get_logger
from .models import PipelineStage
from .pipeline import ROUTE_ASSESSMENT_INVITE, FunnelService, audit_store, has_completed_assessment
from .resolver import RecordResolver
from .resumes import LocalResumeStorage, attach_resumes
from .scoring import score_assessment
from .storage import CandidateStore
from .summary import summarize

IDENTITY_KEYS = ("firstName", "lastName", "email", "phone", "city")


def _read_json(path: str) -> Dict[str, Any]:
    input_path = Path(path)
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    try:
        with input_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValidationError([f"{input_path} is not valid JSON: {e}"]) from e
    if not isinstance(data, dict):
        raise ValidationError([f"{input_path} must contain a JSON object"])
    return data


def _store(args: argparse.Namespace) -> CandidateStore:
    return CandidateStore(get_settings(args.db).db_path)


def _admin(args: argparse.Namespace) -> AdminService:
    settings = get_settings(args.db)
    return AdminService(CandidateStore(settings.db_path), optimistic_locking=settings.optimistic_locking)


def _print_candidate_line(c) -> None:
    fit = c.fit_category or "N/A"
    flag = " [disqualified]" if c.admin_data.questionnaire_disqualified else ""
    print(f"{c.id}  {c.full_name:<28} {c.email:<32} {c.admin_data.pipeline_stage:<20} {c.status:<20} {fit}{flag}")


def cmd_intake(args: argparse.Namespace) -> None:
    outcome = FunnelService(_store(args)).submit_intake(_read_json(args.input), candidate_id=args.id)
    print(f"Candidate: {outcome.candidate.id}")
    print(f"Status: {'new' if outcome.created else 'updated'}")
    if outcome.message:
        print(outcome.message)


def cmd_exit_questionnaire(args: argparse.Namespace) -> None:
    outcome = FunnelService(_store(args)).submit_exit_questionnaire(_read_json(args.input))
    print(f"Candidate: {outcome.candidate.id}")
    print(f"Status: {'new' if outcome.created else 'updated'}")
    if outcome.message:
        print(outcome.message)


def cmd_post_interview(args: argparse.Namespace) -> None:
    outcome = FunnelService(_store(args)).submit_post_interview(args.id, _read_json(args.input))
    print(f"Candidate: {outcome.candidate.id}")
    if outcome.route == ROUTE_ASSESSMENT_INVITE:
        print("Next: assessment invitation")
    else:
        print("Next: thank you")


def cmd_start_assessment(args: argparse.Namespace) -> None:
    candidate = FunnelService(_store(args)).start_assessment(args.id)
    print(f"Candidate: {candidate.id}")
    print(f"Status: {candidate.status}")


def cmd_assess(args: argparse.Namespace) -> None:
    data = _read_json(args.input)
    identity = {k: data[k] for k in IDENTITY_KEYS if data.get(k)}
    candidate = FunnelService(_store(args)).submit_assessment(args.id, data, identity=identity)
    result = score_assessment(candidate.assessment)
    print(f"Candidate: {candidate.id}")
    print(f"Score: {result.score}/{result.max_score} ({result.percentage:.1f}%)")
    print(f"Fit: {result.fit_category}")


def cmd_lookup(args: argparse.Namespace) -> None:
    candidate = RecordResolver(_store(args)).lookup(args.email)
    print(f"Candidate: {candidate.id}")
    print(f"Name: {candidate.full_name}")
    print(f"Status: {candidate.status}")
    if has_completed_assessment(candidate):
        print("Assessment already completed.")


def cmd_status(args: argparse.Namespace) -> None:
    _, label, message = FunnelService(_store(args)).check_status(args.email)
    print(label)
    print(message)


def cmd_show(args: argparse.Namespace) -> None:
    candidate = RecordResolver(_store(args)).get(args.id)
    record = candidate.to_dict()
    record["revision"] = candidate.revision
    print(json.dumps(record, indent=2, ensure_ascii=False))


def cmd_summary(args: argparse.Namespace) -> None:
    candidate = RecordResolver(_store(args)).get(args.id)
    if candidate.assessment is None:
        print("No assessment on record.")
        return
    print("\n\n".join(summarize(candidate.assessment)))


def cmd_transcript(args: argparse.Namespace) -> None:
    candidate = RecordResolver(_store(args)).get(args.id)
    text = assessment_transcript(candidate, include_prompt=not args.no_prompt)
    print(text or "No assessment on record.")


def cmd_list(args: argparse.Namespace) -> None:
    candidates = _store(args).list()
    if args.stage:
        candidates = [c for c in candidates if c.admin_data.pipeline_stage == args.stage]
    if args.fit:
        candidates = [c for c in candidates if c.fit_category == args.fit]
    if args.tag:
        candidates = [c for c in candidates if args.tag in c.admin_data.tags]
    if not candidates:
        print("No candidates found.")
        return
    print(f"Found {len(candidates)} candidates:\n")
    for c in candidates:
        _print_candidate_line(c)


def cmd_export(args: argparse.Namespace) -> None:
    candidates = _store(args).list()
    if args.output:
        with Path(args.output).open("w", encoding="utf-8", newline="") as f:
            export_csv(candidates, f)
        print(f"Exported {len(candidates)} candidates to {args.output}")
    else:
        export_csv(candidates, sys.stdout)


def cmd_note(args: argparse.Namespace) -> None:
    c = _admin(args).add_note(args.id, args.text, author_email=args.author)
    print(f"Note added ({len(c.admin_data.notes)} total)")


def cmd_stage(args: argparse.Namespace) -> None:
    c = _admin(args).set_pipeline_stage(args.id, args.stage)
    print(f"{c.id}: {c.admin_data.pipeline_stage}")


def cmd_bulk_stage(args: argparse.Namespace) -> None:
    ids = [i.strip() for i in args.ids.split(",") if i.strip()]
    result = _admin(args).bulk_set_pipeline_stage(ids, args.stage)
    for candidate_id in result.succeeded:
        print(f"[updated] {candidate_id}")
    for candidate_id, message in result.failed.items():
        print(f"[error] {candidate_id} -> {message}")
    print(f"Done. updated={len(result.succeeded)} failed={len(result.failed)}")
    if result.failed:
        raise SystemExit(1)


def cmd_tag(args: argparse.Namespace) -> None:
    if args.tag is None:
        c = RecordResolver(_store(args)).get(args.id)
    else:
        c = _admin(args).add_tag(args.id, args.tag)
    print(f"Tags: {', '.join(c.admin_data.tags) or '(none)'}")
    print(f"Suggested: {', '.join(suggested_tags(c.admin_data)) or '(none)'}")


def cmd_untag(args: argparse.Namespace) -> None:
    c = _admin(args).remove_tag(args.id, args.tag)
    print(f"Tags: {', '.join(c.admin_data.tags) or '(none)'}")


def cmd_rate(args: argparse.Namespace) -> None:
    c = _admin(args).toggle_rating(args.id, args.rating)
    print(f"Rating: {c.admin_data.rating if c.admin_data.rating is not None else '(cleared)'}")


def cmd_schedule(args: argparse.Namespace) -> None:
    c = _admin(args).set_interview_scheduled_at(args.id, args.at)
    print(f"Interview: {c.admin_data.interview_scheduled_at or '(not scheduled)'}")


def cmd_next_step(args: argparse.Namespace) -> None:
    c = _admin(args).set_next_step(args.id, args.text)
    print(f"Next step: {c.admin_data.next_step or '(none)'}")


def cmd_review_resume(args: argparse.Namespace) -> None:
    c = _admin(args).mark_resume_reviewed(args.id)
    print(f"Resume reviewed at {c.admin_data.resume_reviewed_at}")


def cmd_log_email(args: argparse.Namespace) -> None:
    c = _admin(args).log_email(args.id, args.subject, type=args.type)
    print(f"E-mail logged ({len(c.admin_data.emails_sent)} total)")


def cmd_clear_disqualification(args: argparse.Namespace) -> None:
    c = _admin(args).clear_disqualification(args.id)
    print(f"{c.id}: disqualification cleared")


def cmd_attach_resume(args: argparse.Namespace) -> None:
    settings = get_settings(args.db)
    store = CandidateStore(settings.db_path)
    candidate = RecordResolver(store).get(args.id)
    storage = LocalResumeStorage(settings.resume_dir, settings.resume_base_url)
    urls: List[str] = []
    for path in args.file:
        file_path = Path(path)
        if not file_path.exists():
            raise SystemExit(f"Resume file not found: {file_path}")
        urls.append(storage.store(candidate.id, file_path.name, file_path.read_bytes()))
    updated = attach_resumes(store, candidate, urls)
    for url in updated.applicant_questionnaire.resume_urls:
        print(url)


def cmd_delete(args: argparse.Namespace) -> None:
    _admin(args).delete_candidate(args.id, confirm=args.yes)
    print(f"Deleted {args.id}")


def cmd_audit(args: argparse.Namespace) -> None:
    report = audit_store(_store(args).list())
    if not report:
        print("No issues found.")
        return
    for candidate_id, findings in report.items():
        print(candidate_id)
        for finding in findings:
            print(f" - {finding}")
    raise SystemExit(1)


def cmd_import_json(args: argparse.Namespace) -> None:
    records = load_records(Path(args.input))
    report = import_records(_store(args), records, dry_run=args.dry_run)
    prefix = "[DRY RUN] " if args.dry_run else ""
    print(f"{prefix}imported={len(report.imported)} skipped={len(report.skipped)} errors={len(report.errors)}")
    for key, message in report.errors.items():
        print(f"[error] {key} -> {message}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hirefunnel", description="Candidate intake, assessment and pipeline CLI")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--db", help="Path to SQLite database (default: $HIREFUNNEL_DB_PATH or data/candidates.db)")

    subparsers = parser.add_subparsers(dest="command")

    p = subparsers.add_parser("intake", help="Submit a pre-interview questionnaire JSON")
    p.add_argument("--input", required=True, help="Path to questionnaire JSON")
    p.add_argument("--id", help="Update this candidate instead of resolving by e-mail")
    p.set_defaults(func=cmd_intake)

    p = subparsers.add_parser("exit-questionnaire", help="Submit a post career-overview questionnaire JSON")
    p.add_argument("--input", required=True, help="Path to questionnaire JSON")
    p.set_defaults(func=cmd_exit_questionnaire)

    p = subparsers.add_parser("post-interview", help="Record interview confirmation for a candidate")
    p.add_argument("--id", required=True, help="Candidate id")
    p.add_argument("--input", required=True, help="Path to JSON with interviewCompleted, consent, ceoInvite")
    p.set_defaults(func=cmd_post_interview)

    p = subparsers.add_parser("start-assessment", help="Mark the assessment as started")
    p.add_argument("--id", required=True, help="Candidate id")
    p.set_defaults(func=cmd_start_assessment)

    p = subparsers.add_parser("assess", help="Submit a completed assessment JSON and score it")
    p.add_argument("--id", required=True, help="Candidate id")
    p.add_argument("--input", required=True, help="Path to assessment JSON")
    p.set_defaults(func=cmd_assess)

    p = subparsers.add_parser("lookup", help="Find a candidate by e-mail")
    p.add_argument("--email", required=True)
    p.set_defaults(func=cmd_lookup)

    p = subparsers.add_parser("status", help="Show the candidate-facing application status")
    p.add_argument("--email", required=True)
    p.set_defaults(func=cmd_status)

    p = subparsers.add_parser("show", help="Print a stored candidate record as JSON")
    p.add_argument("--id", required=True)
    p.set_defaults(func=cmd_show)

    p = subparsers.add_parser("summary", help="Print the narrative assessment summary")
    p.add_argument("--id", required=True)
    p.set_defaults(func=cmd_summary)

    p = subparsers.add_parser("transcript", help="Print the assessment as plain-text Q&A")
    p.add_argument("--id", required=True)
    p.add_argument("--no-prompt", action="store_true", help="Omit the trailing analysis prompt")
    p.set_defaults(func=cmd_transcript)

    p = subparsers.add_parser("list", help="List stored candidates, newest first")
    p.add_argument("--stage", choices=PipelineStage.ALL, help="Only this pipeline stage")
    p.add_argument("--fit", help="Only this fit category")
    p.add_argument("--tag", help="Only candidates with this tag")
    p.set_defaults(func=cmd_list)

    p = subparsers.add_parser("export", help="Export all candidates as CSV")
    p.add_argument("--output", help="Write to this file instead of stdout")
    p.set_defaults(func=cmd_export)

    p = subparsers.add_parser("note", help="Add an admin note")
    p.add_argument("--id", required=True)
    p.add_argument("--text", required=True)
    p.add_argument("--author", help="Author e-mail")
    p.set_defaults(func=cmd_note)

    p = subparsers.add_parser("stage", help="Set the pipeline stage")
    p.add_argument("--id", required=True)
    p.add_argument("--stage", required=True, help=f"One of: {', '.join(PipelineStage.ALL)}")
    p.set_defaults(func=cmd_stage)

    p = subparsers.add_parser("bulk-stage", help="Set the pipeline stage for several candidates")
    p.add_argument("--ids", required=True, help="Comma-separated candidate ids")
    p.add_argument("--stage", required=True)
    p.set_defaults(func=cmd_bulk_stage)

    p = subparsers.add_parser("tag", help="Add a tag (omit --tag to list suggestions)")
    p.add_argument("--id", required=True)
    p.add_argument("--tag")
    p.set_defaults(func=cmd_tag)

    p = subparsers.add_parser("untag", help="Remove a tag")
    p.add_argument("--id", required=True)
    p.add_argument("--tag", required=True)
    p.set_defaults(func=cmd_untag)

    p = subparsers.add_parser("rate", help="Set (or clear, if unchanged) the 1-5 rating")
    p.add_argument("--id", required=True)
    p.add_argument("--rating", type=int, required=True)
    p.set_defaults(func=cmd_rate)

    p = subparsers.add_parser("schedule", help="Set the interview date/time (empty clears)")
    p.add_argument("--id", required=True)
    p.add_argument("--at", default="", help="ISO date/time")
    p.set_defaults(func=cmd_schedule)

    p = subparsers.add_parser("next-step", help="Set the next-step text")
    p.add_argument("--id", required=True)
    p.add_argument("--text", default="")
    p.set_defaults(func=cmd_next_step)

    p = subparsers.add_parser("review-resume", help="Mark the resume as reviewed")
    p.add_argument("--id", required=True)
    p.set_defaults(func=cmd_review_resume)

    p = subparsers.add_parser("log-email", help="Record an e-mail sent to the candidate")
    p.add_argument("--id", required=True)
    p.add_argument("--subject", required=True)
    p.add_argument("--type", default="manual")
    p.set_defaults(func=cmd_log_email)

    p = subparsers.add_parser("clear-disqualification", help="Remove the questionnaire disqualification marker")
    p.add_argument("--id", required=True)
    p.set_defaults(func=cmd_clear_disqualification)

    p = subparsers.add_parser("attach-resume", help="Store resume files and link them to a candidate")
    p.add_argument("--id", required=True)
    p.add_argument("--file", required=True, action="append", help="Resume file (repeatable)")
    p.set_defaults(func=cmd_attach_resume)

    p = subparsers.add_parser("delete", help="Permanently delete a candidate")
    p.add_argument("--id", required=True)
    p.add_argument("--yes", action="store_true", help="Confirm deletion")
    p.set_defaults(func=cmd_delete)

    p = subparsers.add_parser("audit", help="Report records whose state tracks disagree")
    p.set_defaults(func=cmd_audit)

    p = subparsers.add_parser("import-json", help="Import candidate records from a JSON array")
    p.add_argument("--input", required=True)
    p.add_argument("--dry-run", action="store_true")
    p.set_defaults(func=cmd_import_json)

    return parser


def main(argv: Optional[List[str]] = None):
    # Load .env if present (HIREFUNNEL_DB_PATH, HIREFUNNEL_LOG_LEVEL, etc.)
    load_env()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if not hasattr(args, "func"):
        parser.print_help()
        return

    settings = get_settings(args.db)
    logger = get_logger(level=settings.log_level, log_dir=settings.log_dir)
    try:
        args.func(args)
    except FunnelError as e:
        logger.record_failure(type(e).__name__)
        logger.debug("Command failed", command=args.command, error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(e.exit_code)


if __name__ == "__main__":
    main()
