"""Allow ``python -m pentreport``."""

from pentreport.pipeline import main

main()
