"""
Exporter for categorised statement data.

XLSX output has 2 sheets:
1. Transactions - one row per transaction with its category
2. Summary - totals and category breakdown

CSV output holds the Transactions sheet only.
"""
import logging
from pathlib import Path

import openpyxl
import pandas as pd
from openpyxl.styles import Font, PatternFill, Alignment
from openpyxl.utils import get_column_letter

from ..categorization import colour_of
from ..pipeline import CategorisationRun

logger = logging.getLogger(__name__)

COLUMNS = [
    ("date", "Date"),
    ("description", "Description"),
    ("amount", "Amount"),
    ("category", "Category"),
    ("subcategory", "Subcategory"),
    ("confidence", "Confidence"),
    ("needsHomework", "Needs Homework"),
    ("reasoning", "Reasoning"),
]


def run_to_dataframe(run: CategorisationRun) -> pd.DataFrame:
    """Convert a categorisation run to a DataFrame with display headers."""
    df = pd.DataFrame(run.rows(), columns=[key for key, _ in COLUMNS])
    return df.rename(columns=dict(COLUMNS))


class ResultExporter:
    """Export categorisation runs to CSV or formatted Excel."""

    # Colors
    HEADER_COLOR = "366092"  # Dark blue
    WARNING_COLOR = "FFC7CE"  # Light red
    INFO_COLOR = "FFEB9C"  # Light yellow

    def export(self, run: CategorisationRun, output_path: Path) -> Path:
        """
        Export a run, choosing the format from the file extension.

        Args:
            run: Categorisation run to export
            output_path: Destination (.csv or .xlsx)

        Returns:
            Path to created file
        """
        output_path = Path(output_path)
        suffix = output_path.suffix.lower()

        if suffix == '.csv':
            return self.export_csv(run, output_path)
        if suffix == '.xlsx':
            return self.export_excel(run, output_path)

        raise ValueError(f"Unsupported export format: {output_path.suffix}")

    def export_csv(self, run: CategorisationRun, output_path: Path) -> Path:
        """Write transactions and categories to CSV."""
        logger.info(f"Exporting to CSV: {output_path}")
        output_path.parent.mkdir(parents=True, exist_ok=True)
        run_to_dataframe(run).to_csv(output_path, index=False)
        return output_path

    def export_excel(
        self,
        run: CategorisationRun,
        output_path: Path,
        highlight_homework: bool = True
    ) -> Path:
        """
        Write a formatted workbook.

        Args:
            run: Categorisation run to export
            output_path: Destination .xlsx path
            highlight_homework: Whether to highlight rows that need review

        Returns:
            Path to created file
        """
        logger.info(f"Exporting to Excel: {output_path}")
        output_path.parent.mkdir(parents=True, exist_ok=True)

        wb = openpyxl.Workbook()

        # Remove default sheet
        if "Sheet" in wb.sheetnames:
            wb.remove(wb["Sheet"])

        self._create_transactions_sheet(wb, run, highlight_homework)
        self._create_summary_sheet(wb, run)

        wb.save(output_path)
        logger.info(f"Excel export complete: {output_path}")

        return output_path

    def _create_transactions_sheet(
        self,
        wb: openpyxl.Workbook,
        run: CategorisationRun,
        highlight_homework: bool
    ) -> None:
        """Create transactions sheet with formatted data."""
        ws = wb.create_sheet("Transactions", 0)
        headers = [label for _, label in COLUMNS]

        for col, header in enumerate(headers, 1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.font = Font(bold=True, color="FFFFFF")
            cell.fill = PatternFill(start_color=self.HEADER_COLOR, fill_type="solid")
            cell.alignment = Alignment(horizontal="center", vertical="center")

        for row, data in enumerate(run.rows(), 2):
            for col, (key, _) in enumerate(COLUMNS, 1):
                ws.cell(row=row, column=col, value=data.get(key))

            ws.cell(row=row, column=3).number_format = '£#,##0.00'

            if highlight_homework and data.get('needsHomework'):
                for col in range(1, len(headers) + 1):
                    ws.cell(row=row, column=col).fill = PatternFill(
                        start_color=self.WARNING_COLOR,
                        fill_type="solid"
                    )
            elif data.get('category'):
                ws.cell(row=row, column=4).fill = PatternFill(
                    start_color=colour_of(data['category']).lstrip('#').upper(),
                    fill_type="solid"
                )

        for col in range(1, len(headers) + 1):
            ws.column_dimensions[get_column_letter(col)].width = 15

        # Description and reasoning columns wider
        ws.column_dimensions['B'].width = 50
        ws.column_dimensions['H'].width = 60

        ws.freeze_panes = "A2"

    def _create_summary_sheet(self, wb: openpyxl.Workbook, run: CategorisationRun) -> None:
        """Create summary sheet with totals and spend per category."""
        ws = wb.create_sheet("Summary", 1)

        row = 1
        for label, value in run.totals.items():
            ws.cell(row=row, column=1, value=label.replace('_', ' ').title()).font = Font(bold=True)
            ws.cell(row=row, column=2, value=value)
            row += 1

        row += 1
        ws.cell(row=row, column=1, value="Category").font = Font(bold=True)
        ws.cell(row=row, column=2, value="Subcategory").font = Font(bold=True)
        ws.cell(row=row, column=3, value="Net Amount").font = Font(bold=True)
        row += 1

        df = run_to_dataframe(run)
        if not df.empty:
            breakdown = (
                df.dropna(subset=["Category"])
                .groupby(["Category", "Subcategory"], as_index=False)["Amount"]
                .sum()
            )
            for record in breakdown.itertuples(index=False):
                ws.cell(row=row, column=1, value=record[0])
                ws.cell(row=row, column=2, value=record[1])
                cell = ws.cell(row=row, column=3, value=float(record[2]))
                cell.number_format = '£#,##0.00'
                cell.fill = PatternFill(start_color=self.INFO_COLOR, fill_type="solid")
                row += 1

        ws.column_dimensions['A'].width = 25
        ws.column_dimensions['B'].width = 25
        ws.column_dimensions['C'].width = 15
