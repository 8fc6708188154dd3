"""
ProductFlow

Guided product catalog entry: a linear wizard that walks through brand,
product line, variants, options, ingredients and retail sources.
"""

__version__ = "1.0.0"
