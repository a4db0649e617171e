"""My Tax Calc - Malaysian personal income tax calculator."""

__version__ = "0.1.0"
