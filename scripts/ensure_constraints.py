#!/usr/bin/env python3
"""Create the unique id constraints Kith expects in Neo4j (Account, Person,
Interaction). Run once per database from repo root with .env (NEO4J_URI,
NEO4J_USER, NEO4J_PASSWORD). Idempotent.
"""
import os
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(REPO_ROOT / "src"))

from dotenv import load_dotenv  # noqa: E402
from neo4j import GraphDatabase  # noqa: E402

from kith.infrastructure import ensure_constraints  # noqa: E402

load_dotenv(REPO_ROOT / ".env")


def main() -> int:
    uri = os.environ.get("NEO4J_URI", "bolt://localhost:7687").strip()
    user = os.environ.get("NEO4J_USER", "neo4j").strip()
    password = os.environ.get("NEO4J_PASSWORD", "password").strip()
    driver = GraphDatabase.driver(uri, auth=(user, password))
    try:
        ensure_constraints(driver)
        print(f"Constraints ensured on {uri}.")
        return 0
    except Exception as e:
        print(f"Failed to create constraints: {e}", file=sys.stderr)
        return 1
    finally:
        driver.close()


if __name__ == "__main__":
    sys.exit(main())
