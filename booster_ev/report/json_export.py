"""JSON export utilities."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any

from booster_ev.models.valuation import ProductValuation, RankingResult


def _write_json(data: Any, output_dir: str, filename: str) -> str:
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    filepath = output_path / filename

    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False, default=str)

    return str(filepath)


def export_ranking_json(
    result: RankingResult,
    output_dir: str = "output",
    include_all_rows: bool = False,
) -> str:
    """
    Export a booster ranking to a JSON file.

    Args:
        result: RankingResult to export
        output_dir: Output directory
        include_all_rows: Whether to include every ranked row, not just top/bottom

    Returns:
        Path to exported file
    """
    timestamp = result.generated_at.strftime("%Y-%m-%d")
    data = result.to_dict()

    if include_all_rows:
        data["rows"] = [row.to_dict() for row in result.rows]

    return _write_json(data, output_dir, f"booster_ranking_{timestamp}.json")


def export_valuations_json(
    set_code: str,
    valuations: list[ProductValuation],
    output_dir: str = "output",
    min_price: float = 0.0,
) -> str:
    """
    Export a set's product valuations to a JSON file.

    Args:
        set_code: Set code
        valuations: Product valuations of the set
        output_dir: Output directory
        min_price: Threshold the valuations were computed with

    Returns:
        Path to exported file
    """
    now = datetime.now()
    data = {
        "meta": {
            "set_code": set_code.upper(),
            "timestamp": now.isoformat(),
            "min_price": min_price,
        },
        "valuations": [v.to_dict() for v in valuations],
    }
    filename = f"{set_code.upper()}_{now.strftime('%Y-%m-%d')}_valuations.json"
    return _write_json(data, output_dir, filename)


def load_report_json(filepath: str) -> dict[str, Any]:
    """Load an exported report from a JSON file."""
    with open(filepath, "r", encoding="utf-8") as f:
        return json.load(f)
