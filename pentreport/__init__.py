"""pentreport -- scaffold and compile Typst penetration-test reports."""

__version__ = "0.1.0"
