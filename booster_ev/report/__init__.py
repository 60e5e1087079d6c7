"""Report generation modules."""

from booster_ev.report.json_export import (
    export_ranking_json,
    export_valuations_json,
    load_report_json,
)

__all__ = [
    "export_ranking_json",
    "export_valuations_json",
    "load_report_json",
]
