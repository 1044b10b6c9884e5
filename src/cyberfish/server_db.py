"""
server_db.py: SQLite ledger holding the best score per player name.
"""

import sqlite3
import threading
from typing import List, Optional

from .constants import DB_FILE
from .data_models import ScoreRecord, utc_now
from .logger import get_logger

logger = get_logger("server_db")


class Database:
    """Handles all interaction with the SQLite database."""
    def __init__(self, db_file: str = DB_FILE):
        # check_same_thread=False: the web server calls in from worker threads
        self.conn = sqlite3.connect(db_file, check_same_thread=False)
        self.lock = threading.Lock()
        self.setup()

    def setup(self):
        """Creates tables if they don't exist."""
        with self.lock:
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS Scores (
                    name TEXT PRIMARY KEY,
                    score INTEGER NOT NULL,
                    date TEXT NOT NULL
                )
            """)
            self.conn.commit()

    def get_scores(self) -> List[ScoreRecord]:
        """All records, best first."""
        with self.lock:
            rows = self.conn.execute(
                "SELECT name, score, date FROM Scores ORDER BY score DESC, date ASC"
            ).fetchall()
        return [ScoreRecord(name=name, score=score, date=date) for name, score, date in rows]

    def upsert_score(self, name: str, score: int, date: Optional[str] = None) -> bool:
        """
        Stores the score unless the player already has an equal or better one.
        Returns True when a record was created or replaced.
        """
        date = date or utc_now()
        with self.lock:
            cur = self.conn.execute("""
                INSERT INTO Scores (name, score, date) VALUES (?, ?, ?)
                ON CONFLICT(name) DO UPDATE
                    SET score = excluded.score, date = excluded.date
                    WHERE excluded.score > Scores.score
            """, (name, score, date))
            self.conn.commit()
            changed = cur.rowcount > 0
        if changed:
            logger.info("Recorded %s -> %d", name, score,
                        extra={"data": {"name": name, "score": score}})
        return changed

    def name_exists(self, name: str) -> bool:
        with self.lock:
            row = self.conn.execute(
                "SELECT 1 FROM Scores WHERE name=?", (name,)).fetchone()
        return row is not None

    def close(self):
        with self.lock:
            self.conn.close()
