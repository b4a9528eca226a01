"""Export categorised results."""
from .excel_exporter import ResultExporter, run_to_dataframe

__all__ = ['ResultExporter', 'run_to_dataframe']
