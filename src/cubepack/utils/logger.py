import os
import json
import logging
import pandas as pd
from datetime import datetime
from typing import Any, Dict, List, Optional


LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging for command-line use."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def save_results_to_csv(results: List[Dict[str, Any]], csv_path: str,
                        append: bool = True) -> Optional[pd.DataFrame]:
    """
    Saves summary rows to a CSV file.
    If the file exists and append is set, the new rows are appended.

    Args:
        results (List[Dict[str, Any]]): Rows to write.
        csv_path (str): The path to the output CSV file.
        append (bool): Keep existing rows.
    """
    if not results:
        return None
    results_df = pd.DataFrame(results)

    if append and os.path.exists(csv_path):
        try:
            existing_df = pd.read_csv(csv_path)
            updated_df = pd.concat([existing_df, results_df], ignore_index=True)
        except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            print(f"Could not read existing CSV file: {e}. Creating a new one.")
            updated_df = results_df
    else:
        updated_df = results_df

    updated_df.to_csv(csv_path, index=False)
    print(f"Results saved to {csv_path}")
    return updated_df


class GenerationLogger:
    def __init__(self, log_dir: str, run_name: str):
        """
        Initializes the logger for a generation run.

        Args:
            log_dir (str): The base directory for logs.
            run_name (str): A name for the run; a timestamp is appended.
        """
        self.timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.run_name = f"{run_name}_{self.timestamp}"
        self.run_dir = os.path.join(log_dir, self.run_name)
        self.logs: List[Dict[str, Any]] = []

        os.makedirs(self.run_dir, exist_ok=True)

    def log_generation(self, index: int, data: Dict[str, Any], verbose: bool = False):
        """
        Logs a single generation request.

        Args:
            index (int): Sequence number of the request in this run.
            data (Dict[str, Any]): Result data, usually GenerationResult.to_dict().
            verbose (bool): Whether to print a line to the console.
        """
        log_entry = {"index": index, "timestamp": datetime.now().isoformat(), **data}

        if verbose:
            status = data.get("status", "unknown")
            difficulty = data.get("difficulty", "?")
            attempts = data.get("attempts", "?")
            if status == "solved":
                print(f"✅ #{index}: {difficulty} solved after {attempts} attempt(s)")
            else:
                print(f"❌ #{index}: {difficulty} exhausted {attempts} attempt(s)")

        self.logs.append(log_entry)

    def save_logs(self) -> str:
        """Saves all collected logs to a JSON file plus a text summary."""
        log_file = os.path.join(self.run_dir, "generation_log.json")
        with open(log_file, "w") as f:
            json.dump(self.logs, f, indent=2, default=str)

        summary_file = os.path.join(self.run_dir, "summary.txt")
        self._create_summary_file(summary_file)

        print(f"📁 Logs saved to: {log_file}")
        print(f"📋 Summary saved to: {summary_file}")
        return log_file

    def _create_summary_file(self, summary_file: str):
        """Create a human-readable summary file."""
        solved = [log for log in self.logs if log.get("status") == "solved"]
        exhausted = [log for log in self.logs if log.get("status") == "exhausted_retries"]

        with open(summary_file, "w") as f:
            f.write(f"Generation Summary: {self.run_name}\n")
            f.write("=" * 60 + "\n")
            f.write(f"Requests: {len(self.logs)}\n")
            f.write(f"Solved: {len(solved)}\n")
            f.write(f"Exhausted: {len(exhausted)}\n")
            f.write("\nRequest breakdown:\n")
            f.write("-" * 30 + "\n")

            for log in self.logs:
                index = log.get("index", "?")
                difficulty = log.get("difficulty", "?")
                attempts = log.get("attempts", "?")
                if log.get("status") == "solved":
                    level = log.get("level") or {}
                    columns = (level.get("target_area") or {}).get("footprint_size", "?")
                    f.write(f"#{index}: {difficulty} solved in {attempts} attempt(s), "
                            f"{len(level.get('pieces', []))} pieces, {columns} columns\n")
                else:
                    f.write(f"#{index}: {difficulty} EXHAUSTED after {attempts} attempt(s)\n")
                    if log.get("rejections"):
                        f.write(f"  Rejections: {log['rejections']}\n")

    def save_results_to_csv(self, results: List[Dict[str, Any]], csv_path: str,
                            append: bool = True) -> Optional[pd.DataFrame]:
        return save_results_to_csv(results, csv_path, append)
