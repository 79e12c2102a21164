#!/usr/bin/env python3
"""
Convenience wrapper for the feepredictor package.
Prefer: python -m feepredictor.cli or the fee-predictor console script.
"""

from feepredictor.cli import main

if __name__ == "__main__":
    main()
