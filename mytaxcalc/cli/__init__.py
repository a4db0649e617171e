"""My Tax Calc command-line interface."""
