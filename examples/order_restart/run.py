"""
Example job: process orders by composite key and resume after a crash.

Demonstrates the driving_keys package with:
- SQLiteQueryExecutor (no SQL Server required)
- A composite (region, id) key with ColumnMapKeyMapper
- A JSON checkpoint file written after every processed key
- A simulated failure followed by a restart from the checkpoint
"""

import json
import logging
import sqlite3
import tempfile
from pathlib import Path

from driving_keys import ColumnMapKeyMapper, KeyCursor, KeyGenerator, SQLiteQueryExecutor

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger("order_restart")

ORDERS = [
    (1, "EU", "Widget"),
    (2, "EU", "Gadget"),
    (3, "EU", "Sprocket"),
    (1, "US", "Widget"),
    (2, "US", "Doohickey"),
    (1, "APAC", "Gizmo"),
]


def create_database(path: Path) -> None:
    conn = sqlite3.connect(path)
    try:
        conn.execute("CREATE TABLE orders (id INTEGER, region TEXT, item TEXT, PRIMARY KEY (region, id))")
        conn.executemany("INSERT INTO orders (id, region, item) VALUES (?, ?, ?)", ORDERS)
        conn.commit()
    finally:
        conn.close()


def create_generator(database: Path) -> KeyGenerator:
    """
    Create the key generator for the orders job.

    Returns:
        Configured KeyGenerator ready to run
    """
    return KeyGenerator(
        executor=SQLiteQueryExecutor(database),
        query="SELECT id, region FROM orders ORDER BY region, id",
        restart_query=(
            "SELECT id, region FROM orders "
            "WHERE (region, id) > (:region, :id) "
            "ORDER BY region, id"
        ),
        mapper=ColumnMapKeyMapper(columns=["id", "region"], paramstyle="named"),
        name="orders",
    )


def run_job(generator: KeyGenerator, checkpoint_file: Path, fail_after: int = 0) -> int:
    """
    Process keys, persisting a checkpoint after each one.

    Args:
        generator: Key generator for the job
        checkpoint_file: JSON file holding the last checkpoint
        fail_after: Simulate a crash after this many keys (0 = never)

    Returns:
        Number of keys processed in this run
    """
    saved = None
    if checkpoint_file.exists():
        saved = json.loads(checkpoint_file.read_text(encoding="utf-8"))

    cursor = KeyCursor(generator, checkpoint=saved)
    processed = 0

    for key in cursor:
        logger.info(f"Processing order {key.as_dict()}")
        processed += 1
        checkpoint_file.write_text(json.dumps(cursor.checkpoint.to_dict()), encoding="utf-8")

        if fail_after and processed == fail_after:
            raise RuntimeError(f"Simulated failure after {processed} orders")

    return processed


def main():
    """Run the job, crash part way through, and restart it."""
    with tempfile.TemporaryDirectory() as tmpdir:
        database = Path(tmpdir) / "orders.db"
        checkpoint_file = Path(tmpdir) / "checkpoint.json"
        create_database(database)

        generator = create_generator(database)

        try:
            run_job(generator, checkpoint_file, fail_after=3)
        except RuntimeError as e:
            logger.warning(f"First run stopped: {e}")

        logger.info(f"Restarting from {checkpoint_file.read_text(encoding='utf-8')}")
        processed = run_job(generator, checkpoint_file)
        logger.info(f"Restart processed the remaining {processed} orders")


if __name__ == "__main__":
    main()
