"""Report generation - persist rendered portfolio reports and raw JSON."""

from __future__ import annotations

import json
from pathlib import Path

from portfolio_builder.config import Paths
from portfolio_builder.pipeline.context import GenerationResult
from portfolio_builder.reports.renderer import ReportRenderer
from portfolio_builder.utils.logger import setup_logger

logger = setup_logger("reports")


class ReportGenerator:
    """Render a GenerationResult and save it as markdown + JSON."""

    def __init__(
        self,
        output_dir: Path | None = None,
        template: str = "portfolio.md.j2",
        currency: str = "₹",
        renderer: ReportRenderer | None = None,
    ):
        self.output_dir = output_dir or Paths.REPORTS_OUTPUT
        self.template = template
        self.renderer = renderer or ReportRenderer(currency=currency)

    def render(self, result: GenerationResult) -> str:
        return self.renderer.render(self.template, result)

    def save(self, result: GenerationResult) -> tuple[Path, Path]:
        """Write ``portfolio_<run_id>.md`` and ``.json``; return both paths."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        stem = f"portfolio_{result.run_id or result.started_at.strftime('%Y%m%d_%H%M%S')}"

        report_path = self.output_dir / f"{stem}.md"
        report_path.write_text(self.render(result), encoding="utf-8")

        json_path = self.output_dir / f"{stem}.json"
        json_path.write_text(json.dumps(result.to_dict(), indent=2, default=str), encoding="utf-8")

        logger.info("Report saved: %s", report_path)
        return report_path, json_path
