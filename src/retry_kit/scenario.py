"""File-driven retry runs.

Loads a scenario definition, runs it through the executor, writes a report.
"""

import json
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Optional

import yaml

from retry_kit.constants import DEFAULT_MAX_ATTEMPTS, DEFAULT_REPORTS_DIR
from retry_kit.retry import BoundedRetryExecutor, RetryResult
from retry_kit.services import FlakyService, ScriptedOperation


@dataclass
class ScenarioRun:
    """One finished scenario and where its report went."""
    name: str
    result: RetryResult
    report_path: Path
    elapsed: timedelta


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_fields(data: dict) -> None:
    name = data["name"]
    if not isinstance(name, str) or not name.strip():
        raise ValueError("Scenario name must be a non-empty string")
    # The name becomes a report filename inside the output directory
    if "/" in name or "\\" in name or name in (".", ".."):
        raise ValueError(f"Scenario name must not contain path separators: {name!r}")

    for key in ("max_attempts", "failures_before_success", "seed"):
        if key in data and not _is_int(data[key]):
            raise ValueError(f"Scenario field {key} must be an integer, got {data[key]!r}")
    if "succeed" in data and not isinstance(data["succeed"], bool):
        raise ValueError(f"Scenario field succeed must be true or false, got {data['succeed']!r}")
    if "success_rate" in data:
        rate = data["success_rate"]
        if isinstance(rate, bool) or not isinstance(rate, (int, float)):
            raise ValueError(f"Scenario field success_rate must be a number, got {rate!r}")


def load_scenario(scenario_file: Path) -> dict:
    """
    Load a scenario definition from YAML or JSON.

    Required fields:
        - name: str (used in the report filename, no path separators)

    Optional fields:
        - max_attempts: int
        - failures_before_success: int, with succeed: bool (default true)
        - success_rate: float, with seed: int
    """
    content = scenario_file.read_text()

    if scenario_file.suffix in (".yaml", ".yml"):
        data = yaml.safe_load(content)
    elif scenario_file.suffix == ".json":
        data = json.loads(content)
    else:
        raise ValueError(f"Unsupported file type: {scenario_file.suffix}. Use .yaml, .yml, or .json")

    if not isinstance(data, dict):
        raise ValueError("Scenario definition must be a mapping")
    if "name" not in data:
        raise ValueError("Scenario definition missing required field: name")
    if "failures_before_success" in data and "success_rate" in data:
        raise ValueError("Scenario may set failures_before_success or success_rate, not both")

    _check_fields(data)
    return data


def build_operation(scenario: dict) -> Callable[[], Any]:
    """Construct the fallible operation a scenario describes."""
    if "success_rate" in scenario:
        seed = scenario.get("seed")
        rng = random.Random(seed) if seed is not None else None
        return FlakyService(scenario["success_rate"], rng=rng)

    return ScriptedOperation(
        failures_before_success=scenario.get("failures_before_success", 0),
        succeed=scenario.get("succeed", True),
    )


def write_scenario_report(
    scenario: dict,
    result: RetryResult,
    output_dir: Path,
    start_time: datetime,
    end_time: datetime,
) -> Path:
    """
    Write a structured run report to disk.

    Filename: {name}_{timestamp}.json
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    timestamp = end_time.strftime("%Y%m%d_%H%M%S")
    report_path = output_dir / f"{scenario['name']}_{timestamp}.json"

    report = {
        "name": scenario["name"],
        "outcome": result.outcome.value,
        "attempts": result.attempts,
        "max_attempts": result.max_attempts,
        "last_error": str(result.last_error) if result.last_error else None,
        "start_time": start_time.isoformat(),
        "end_time": end_time.isoformat(),
        "duration_seconds": (end_time - start_time).total_seconds(),
    }

    report_path.write_text(json.dumps(report, indent=2))

    return report_path


def run_scenario(
    scenario_file: Path,
    output_dir: Optional[Path] = None,
    default_max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> ScenarioRun:
    """
    Load a scenario, run it, write its report.

    The scenario's own max_attempts wins over ``default_max_attempts``.
    """
    if output_dir is None:
        output_dir = Path(DEFAULT_REPORTS_DIR)

    scenario = load_scenario(scenario_file)
    executor = BoundedRetryExecutor(scenario.get("max_attempts", default_max_attempts))
    operation = build_operation(scenario)

    start_time = datetime.now()
    result = executor.execute(operation)
    end_time = datetime.now()

    report_path = write_scenario_report(scenario, result, output_dir, start_time, end_time)
    return ScenarioRun(
        name=scenario["name"],
        result=result,
        report_path=report_path,
        elapsed=end_time - start_time,
    )


def format_elapsed(elapsed: timedelta) -> str:
    """Render a run's wall time; attempts never sleep, so most runs are sub-second."""
    seconds = elapsed.total_seconds()
    if seconds < 1:
        return f"{seconds * 1000:.1f}ms"
    return f"{seconds:.2f}s"
