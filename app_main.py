"""Application entry point for QuizProctor.

``serve`` runs the API server, optionally seeding published quizzes from
definition files. ``take`` opens the student client for a quiz link.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import socket
import sys

from quiz_proctor.config import get_settings
from quiz_proctor.constants.about import APP_ABOUT_TEXT, APP_LICENSE, APP_NAME, APP_VERSION, HELP_TEXT
from quiz_proctor.utils.logging_config import configure_logging


def _determine_student_url(port: int) -> str:
    """Best-effort determination of the local IP for the student-facing URL."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("8.8.8.8", 80))
            ip_address = sock.getsockname()[0]
    except OSError:
        ip_address = "127.0.0.1"
    return f"http://{ip_address}:{port}"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quiz-proctor",
        description=APP_ABOUT_TEXT,
        epilog=HELP_TEXT,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION} ({APP_LICENSE})")
    subcommands = parser.add_subparsers(dest="command", required=True)

    serve = subcommands.add_parser("serve", help="Run the quiz API server")
    serve.add_argument("--quiz", action="append", default=[], metavar="FILE",
                       help="Quiz definition file to create and publish (repeatable)")
    serve.add_argument("--owner", default="local-teacher",
                       help="Teacher id owning the seeded quizzes")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--export-dir", default=None, metavar="DIR",
                       help="Write each seeded quiz's submissions as CSV here on shutdown")

    take = subcommands.add_parser("take", help="Take a quiz in the proctored student client")
    take.add_argument("link", help="Quiz link token")
    take.add_argument("--server", default=None, help="Base URL of the quiz server")
    return parser


def _serve(args: argparse.Namespace, logger: logging.Logger) -> int:
    from quiz_proctor.core.errors import QuizProctorError
    from quiz_proctor.core.proctor_manager import ProctorManager
    from quiz_proctor.core.quiz_importer import QuizImportError, load_quiz_from_file
    from quiz_proctor.server.api_server import run_api_server

    settings = get_settings()
    host = args.host or settings.host
    port = args.port or settings.port
    manager = ProctorManager()
    student_url = _determine_student_url(port)
    seeded_ids: list[str] = []

    for path in args.quiz:
        try:
            imported = load_quiz_from_file(path)
            quiz = manager.create_quiz(args.owner, imported.draft)
            quiz = manager.publish_quiz(args.owner, quiz.id)
        except (QuizImportError, QuizProctorError) as exc:
            logger.error("Could not seed quiz from %s: %s", path, exc)
            return 1
        seeded_ids.append(quiz.id)
        logger.info("Published '%s' (id %s) at link %s", quiz.title, quiz.id, quiz.link_token)
        logger.info("Students run: app_main.py take %s --server %s", quiz.link_token, student_url)

    run_api_server(manager, host=host, port=port, log_level=settings.log_level)
    if args.export_dir:
        _export_results(manager, args.owner, seeded_ids, Path(args.export_dir), logger)
    return 0


def _export_results(
    manager,
    owner_id: str,
    quiz_ids: list[str],
    export_dir: Path,
    logger: logging.Logger,
) -> list[Path]:
    """Save the submissions of each quiz as ``<link>-submissions.csv``."""
    from quiz_proctor.core.results_exporter import save_submissions_csv

    written = []
    for quiz_id in quiz_ids:
        quiz = manager.get_quiz(owner_id, quiz_id)
        file_path = export_dir / f"{quiz.link_token}-submissions.csv"
        try:
            save_submissions_csv(file_path, quiz, manager.list_submissions(owner_id, quiz_id))
        except OSError as exc:
            logger.error("Could not export results of '%s' to %s: %s", quiz.title, file_path, exc)
            continue
        logger.info("Exported results of '%s' to %s", quiz.title, file_path)
        written.append(file_path)
    return written


def _take(args: argparse.Namespace, logger: logging.Logger) -> int:
    from PySide6.QtWidgets import QApplication, QDialog

    from quiz_proctor.client.api_client import ApiError, ProctorApiClient
    from quiz_proctor.constants.ui_constants import ALREADY_ATTEMPTED_MESSAGE, WINDOW_TITLE
    from quiz_proctor.ui import RegistrationDialog, StudentQuizWindow, show_error, show_warning
    from quiz_proctor.ui.quiz_window import was_attempted_locally

    settings = get_settings()
    app = QApplication(sys.argv)
    client = ProctorApiClient(args.server or settings.server_url, settings.request_timeout_seconds)

    try:
        quiz = client.fetch_quiz(args.link)
    except ApiError as exc:
        logger.error("Could not load quiz %s: %s", args.link, exc.message)
        show_error(None, WINDOW_TITLE, exc.message)
        client.close()
        return 1

    if was_attempted_locally(quiz.link_token):
        show_warning(None, WINDOW_TITLE, ALREADY_ATTEMPTED_MESSAGE)

    dialog = RegistrationDialog(quiz.title, quiz.form_fields)
    if dialog.exec() != QDialog.Accepted:
        client.close()
        return 0

    window = StudentQuizWindow(quiz, dialog.values(), client)
    window.show()
    exit_code = app.exec()
    client.close()
    return exit_code


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, initialize logging, and run the chosen command."""
    args = _build_parser().parse_args(argv)
    settings = get_settings()
    logger = configure_logging(getattr(logging, settings.log_level.upper(), logging.INFO))
    logger.info("Starting %s %s (%s)", APP_NAME, APP_VERSION, args.command)

    if args.command == "serve":
        return _serve(args, logger)
    return _take(args, logger)


if __name__ == "__main__":
    sys.exit(main())
