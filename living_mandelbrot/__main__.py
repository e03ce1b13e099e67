"""
Allow running the package directly: python -m living_mandelbrot
"""
import sys

from .cli import main

sys.exit(main())
