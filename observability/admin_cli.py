"""Lightweight CLI helpers for inspecting stored interview sessions."""
from __future__ import annotations

import argparse
import sqlite3
from typing import Optional, Sequence

from config.settings import settings
from storage.evaluations import EvaluationStore
from storage.migrate import migrate


def tail_sessions(limit: int = 20) -> None:
    migrate(settings.DB_PATH)
    conn = sqlite3.connect(settings.DB_PATH)
    try:
        cursor = conn.cursor()
        cursor.execute(
            """
            SELECT started_at, id, user_id, role, mode, status, completed_at
            FROM interview_sessions
            ORDER BY started_at DESC
            LIMIT ?
            """,
            (limit,),
        )
        for row in cursor.fetchall():
            started, session_id, user_id, role, mode, status, completed = row
            print(f"[{started}] {session_id} user={user_id} {role}/{mode} -> {status} completed={completed or '-'}")
    finally:
        conn.close()


def show_exchanges(session_id: str) -> None:
    migrate(settings.DB_PATH)
    conn = sqlite3.connect(settings.DB_PATH)
    try:
        cursor = conn.cursor()
        cursor.execute(
            """
            SELECT timestamp, question_number, type, text, score
            FROM interview_exchanges
            WHERE session_id = ?
            ORDER BY timestamp ASC, id ASC
            """,
            (session_id,),
        )
        for row in cursor.fetchall():
            ts, number, kind, text, score = row
            suffix = f" score={score}" if score is not None else ""
            print(f"[{ts}] #{number} {kind.upper()}: {text}{suffix}")
    finally:
        conn.close()


def show_evaluation(session_id: str) -> None:
    evaluation = EvaluationStore().get(session_id)
    if evaluation is None:
        print(f"No evaluation for session {session_id}")
        return
    print(evaluation.model_dump_json(indent=2))


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--migrate", action="store_true", help="Create or upgrade the database schema")
    parser.add_argument("--tail-sessions", type=int, help="Show the latest interview sessions")
    parser.add_argument("--exchanges", metavar="SESSION_ID", help="Print the live transcript of a session")
    parser.add_argument("--evaluation", metavar="SESSION_ID", help="Print the stored evaluation of a session")
    args = parser.parse_args(argv)

    if args.migrate:
        migrate(settings.DB_PATH)
    if args.tail_sessions:
        tail_sessions(args.tail_sessions)
    if args.exchanges:
        show_exchanges(args.exchanges)
    if args.evaluation:
        show_evaluation(args.evaluation)


if __name__ == "__main__":
    main()
