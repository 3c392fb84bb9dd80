"""Run one index ranking refresh and print the table. Exit code 1 when no index could be ranked."""
import sys

from index_ranker import run_pipeline

outcome = run_pipeline()
sys.exit(0 if outcome.ok else 1)
