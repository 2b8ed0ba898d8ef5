"""outbound_checker.report: рендеры отчёта (текст, JSON, HTML), используемые CLI и тестами."""

from outbound_checker.report.html_report import render_html
from outbound_checker.report.json_report import render_json
from outbound_checker.report.text_report import render_text

__all__ = ["render_json", "render_html", "render_text"]
