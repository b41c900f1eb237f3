# src/trcalc/__main__.py
from trcalc.app import main

main()
