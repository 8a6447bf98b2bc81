"""Reporting adapters for ranked results."""

from .printer import format_result_line, format_time, print_results, results_to_dict

__all__ = ["format_result_line", "format_time", "print_results", "results_to_dict"]
