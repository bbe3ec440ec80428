"""
Export report generator for aggregating per-note results.

Formats the outcome of a batch export for console display, JSON export and
CSV export, listing every note that failed together with the reason.
"""

import csv
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from models import DocumentExportResult, ExportStatus


class ExportReport:
    """Generates export reports from per-document results."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize export report generator.

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger('vault_markdown_export.exporters.export_report')

    def generate_report(
        self,
        results: List[DocumentExportResult],
        duration: float,
        output_directory: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Generate export report.

        Args:
            results: Results of every processed document
            duration: Total export duration in seconds
            output_directory: Export destination shown in the summary

        Returns:
            Export report dictionary
        """
        self.logger.info("Generating export report")

        return {
            'summary': self._build_summary(results, duration, output_directory),
            'documents': [result.to_dict() for result in results],
            'errors': self._build_error_summary(results),
            'generated_at': datetime.now(timezone.utc).isoformat()
        }

    def _build_summary(
        self,
        results: List[DocumentExportResult],
        duration: float,
        output_directory: Optional[str]
    ) -> Dict[str, Any]:
        total = len(results)
        exported = sum(1 for r in results if r.status == ExportStatus.EXPORTED)
        skipped = sum(1 for r in results if r.status == ExportStatus.SKIPPED)
        failed = sum(1 for r in results if r.status == ExportStatus.FAILED)

        asset_totals = {'copied': 0, 'deduplicated': 0, 'remote_skipped': 0, 'failed': 0}
        for result in results:
            for key in asset_totals:
                asset_totals[key] += result.asset_stats.get(key, 0)

        return {
            'output_directory': output_directory,
            'documents': total,
            'exported': exported,
            'skipped': skipped,
            'failed': failed,
            'success_rate': ((exported + skipped) / total) if total else 1.0,
            'assets': asset_totals,
            'duration_seconds': duration,
            'duration_formatted': self._format_duration(duration)
        }

    @staticmethod
    def _build_error_summary(results: List[DocumentExportResult]) -> List[Dict[str, Any]]:
        return [
            {'path': result.document.path, 'error': result.error_message}
            for result in results
            if result.status == ExportStatus.FAILED
        ]

    def _format_duration(self, seconds: float) -> str:
        """Format duration in human-readable format."""
        if seconds < 60:
            return f"{seconds:.1f}s"
        elif seconds < 3600:
            minutes = int(seconds // 60)
            secs = int(seconds % 60)
            return f"{minutes}m {secs}s"
        else:
            hours = int(seconds // 3600)
            minutes = int((seconds % 3600) // 60)
            secs = int(seconds % 60)
            return f"{hours}h {minutes}m {secs}s"

    def format_console_report(self, report: Dict[str, Any]) -> str:
        """
        Format report for console display.

        Args:
            report: Export report dictionary

        Returns:
            Formatted console string
        """
        sections = []

        # Header
        sections.append("=" * 60)
        sections.append("EXPORT REPORT")
        sections.append("=" * 60)
        sections.append("")

        summary = report.get('summary', {})
        assets = summary.get('assets', {})
        sections.append("Summary:")
        sections.append(f"  Output:      {summary.get('output_directory') or 'unknown'}")
        sections.append(f"  Documents:   {summary.get('documents', 0)}")
        sections.append(f"  Exported:    {summary.get('exported', 0)}")
        sections.append(f"  Skipped:     {summary.get('skipped', 0)}")
        sections.append(f"  Failed:      {summary.get('failed', 0)}")
        sections.append(
            f"  Assets:      {assets.get('copied', 0)} copied, "
            f"{assets.get('deduplicated', 0)} already present, "
            f"{assets.get('failed', 0)} failed"
        )
        sections.append(f"  Duration:    {summary.get('duration_formatted', '0s')}")
        sections.append(f"  Success:     {summary.get('success_rate', 0) * 100:.1f}%")
        sections.append("")

        errors = report.get('errors', [])
        if errors:
            sections.append("Failed Documents:")
            sections.append("-" * 60)
            for error in errors:
                sections.append(f"  {error['path']}")
                sections.append(f"    {error['error']}")
            sections.append("")

        # Footer
        sections.append("=" * 60)

        return "\n".join(sections)

    def export_json_report(self, report: Dict[str, Any], filepath: str) -> None:
        """
        Export report to JSON file.

        Args:
            report: Export report dictionary
            filepath: Output file path
        """
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(report, f, indent=2, ensure_ascii=False, default=str)

        self.logger.info(f"JSON report exported to {filepath}")

    def export_csv_summary(self, report: Dict[str, Any], filepath: str) -> None:
        """
        Export one row per document to CSV.

        Args:
            report: Export report dictionary
            filepath: Output file path
        """
        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(['path', 'status', 'output_path', 'assets_copied', 'assets_failed', 'error'])

            for document in report.get('documents', []):
                writer.writerow([
                    document['path'],
                    document['status'],
                    document['output_path'] or '',
                    document['assets'].get('copied', 0),
                    document['assets'].get('failed', 0),
                    document['error'] or ''
                ])

        self.logger.info(f"CSV summary exported to {filepath}")
