# SPDX-License-Identifier: MIT
"""Human-readable text for reference info and diagnostics."""

import textwrap

from .constants import DIAGNOSTIC_ABSTRACT_PREVIEW, INFO_WRAP_WIDTH
from .diagnostics import DiagnosticReport
from .models import ReferenceRecord


class OutputFormatter:
    """Formats references and diagnostic reports for display."""

    def format_reference_info(self, reference: ReferenceRecord) -> str:
        """Format the full details of one reference.

        Args:
            reference: Reference to describe

        Returns:
            Multi-line text, abstract wrapped to 80 columns
        """
        lines = ["=== Zotero Reference Info ===", ""]
        lines.append(f"Title: {reference.title}")
        lines.append(f"Authors: {reference.authors_display}")
        lines.append(f"Year: {reference.year}")
        lines.append(f"Type: {reference.item_type}")
        lines.append(f"Publication: {reference.publication}")

        optional = [
            ("Abbreviation", reference.abbreviation),
            ("Organization", reference.organization),
            ("Event", reference.eventshort),
            ("URL", reference.url),
        ]
        for label, value in optional:
            if value:
                lines.append(f"{label}: {value}")

        lines.append("")
        lines.append(f"Key: {reference.item_key}")
        lines.append(f"Zotero URI: {reference.deep_link_uri}")

        if reference.abstract:
            lines.append("")
            lines.append("Abstract:")
            lines.extend(textwrap.wrap(reference.abstract, width=INFO_WRAP_WIDTH))

        return "\n".join(lines)

    def format_diagnostics(self, report: DiagnosticReport) -> str:
        """Format a diagnostic report for an operator.

        Args:
            report: Report produced by `run_diagnostics`

        Returns:
            Multi-line text
        """
        lines = [f"Zotero Database Path: {report.source_path}"]
        lines.append(f"Database exists: {str(report.source_exists).lower()}")

        if not report.source_exists:
            lines.append("ERROR: Database file not found!")
            return "\n".join(lines)

        if report.total_items is None:
            lines.append(f"ERROR: {report.error}")
            return "\n".join(lines)

        lines.append(f"Total items in database: {report.total_items}")
        lines.append("")
        lines.append("Trying to load references...")

        if not report.load_ok:
            lines.append(f"Failed to load references: {report.error}")
            return "\n".join(lines)

        lines.append(f"Successfully loaded {report.loaded_count} references")

        if report.key is not None:
            lines.extend(self._format_key_lookup(report))
            return "\n".join(lines)

        lines.append(f"Untitled entries: {report.untitled_count}")
        if report.untitled_by_type:
            lines.append("")
            lines.append("Untitled entries by type:")
            for item_type, count in sorted(report.untitled_by_type.items()):
                lines.append(f"  {item_type}: {count}")

        if report.samples:
            lines.append("")
            lines.append(f"First {len(report.samples)} references:")
            for index, ref in enumerate(report.samples, start=1):
                lines.append(
                    f"{index}. Title: {ref.title} | Authors: {ref.authors_display} | "
                    f"Year: {ref.year} | Type: {ref.item_type} | Key: {ref.item_key}"
                )
                lines.append(f"   Publication: {ref.publication or '(empty)'}")
                lines.extend(self._format_extra_fields(ref, header_indent="   "))

        return "\n".join(lines)

    def _format_key_lookup(self, report: DiagnosticReport) -> list[str]:
        lines = ["", f"Searching for item with key: {report.key}"]
        ref = report.match
        if ref is None:
            lines.append(f"ERROR: Item with key '{report.key}' not found")
            return lines

        abstract = (
            ref.abstract[:DIAGNOSTIC_ABSTRACT_PREVIEW] + "..."
            if ref.abstract
            else "(empty)"
        )
        lines.extend(
            [
                "",
                f"Title: {ref.title}",
                f"Key: {ref.item_key}",
                f"Authors: {ref.authors_display}",
                f"Year: {ref.year}",
                f"Type: {ref.item_type}",
                f"Publication: {ref.publication or '(empty)'}",
                f"Abstract: {abstract}",
                f"URL: {ref.url or '(empty)'}",
            ]
        )
        lines.extend(self._format_extra_fields(ref))

        lines.append("")
        lines.append("--- Raw SQL Debug ---")
        if report.raw_fields is None:
            lines.append(f"Error querying raw data: {report.raw_error}")
        else:
            lines.append("All fields from database:")
            for name, value in report.raw_fields:
                lines.append(f"  {name} = {value}")

        lines.append("")
        lines.append("--- Main Query Result ---")
        if report.summary is None:
            lines.append(f"Error running main query: {report.summary_error}")
        else:
            for name, value in report.summary.items():
                lines.append(f"  {name} = {value if value else '(null)'}")
        return lines

    def _format_extra_fields(
        self, ref: ReferenceRecord, header_indent: str = ""
    ) -> list[str]:
        if not ref.extra_fields:
            return []
        lines = [f"{header_indent}Extra fields parsed:"]
        for key, value in ref.extra_fields.items():
            lines.append(f"{header_indent}  {key}: {value}")
        return lines


output_formatter = OutputFormatter()
