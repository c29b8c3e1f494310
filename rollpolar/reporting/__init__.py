from rollpolar.reporting.pdf import build_case_report

__all__ = ["build_case_report"]
